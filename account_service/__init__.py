"""
account_service package

Backend for the user account service:

- FastAPI application and routes (`main.py`)
- SQLAlchemy models and database integration (`models.py`, `db.py`)
- Credential store and token registry (`store.py`, `tokens.py`)
- Account orchestration (`service.py`)
- Password hashing (`auth.py`) and request validation (`validation.py`)
"""
