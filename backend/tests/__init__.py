"""
pytest suite for the Baroque Print API.

Test categories:
- Unit tests: catalog, store, validators, services with fake Stripe/Prodigi
- API tests: FastAPI app through httpx ASGITransport
- Integration tests: checkout → webhook → fulfillment, including replays
"""
