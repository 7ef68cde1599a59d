from app.models.measurement import Measurement

__all__ = [
    "Measurement",
]
