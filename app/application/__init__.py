"""
Application layer - Use cases and business logic orchestration.

This layer contains:
- Application services (orchestrate domain + infrastructure)
- Use case implementations
- Business workflows
- DTO conversions

No direct dependencies on frameworks (FastAPI, etc.)
"""
