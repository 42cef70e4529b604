"""Wire (JSON) models for the hosted payment page."""

from realex_hpp.api.models import HppRequestJSON, HppResponseJSON, SupplementaryEntry

__all__ = ["HppRequestJSON", "HppResponseJSON", "SupplementaryEntry"]
