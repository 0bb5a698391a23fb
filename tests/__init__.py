"""
Tests for the Coffee Service

Tests are organized by functionality:
- test_coffee_repository.py: Catalog store against a real (in-memory) database
- test_order_stream.py: Tick timing, drop-on-backpressure and cancellation
- test_coffee_service.py: Service mediation and optional id validation
- test_seed_loader.py: Reseeding and its error handling
- api/test_coffees.py: HTTP endpoints, including the SSE order stream
"""
