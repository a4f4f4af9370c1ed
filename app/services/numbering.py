import random
from datetime import datetime


def generate_reference(prefix: str) -> str:
    """Human-readable record number like PUR-20250125093000-4567"""
    timestamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
    random_suffix = random.randint(1000, 9999)
    return f"{prefix}-{timestamp}-{random_suffix}"
