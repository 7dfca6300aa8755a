"""Generate tRPC app routers with Zod schemas from NestJS-style TypeScript routers."""
