"""
Application Layer

Contains use cases, command handlers, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: write operations that combine the store with an external call
- services/: the session store, the single authority over shared state
- interfaces/: Port interfaces for infrastructure adapters
"""
