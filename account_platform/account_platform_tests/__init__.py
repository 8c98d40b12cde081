"""
account_service tests

Covers the backend logic of the account service:

- FastAPI application factory and routes (`main.py`, `routes/`)
- Credential store and SQLAlchemy models (`store.py`, `models.py`, `db.py`)
- Password hashing and token signing (`auth.py`)
- Settings (`config.py`) and the auth event logger (`utils/event_logger.py`)
"""
