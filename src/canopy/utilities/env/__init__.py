"""Environment configuration helpers."""

from canopy.utilities.env.config import Configuration as Configuration
from canopy.utilities.env.enums import \
    BranchOverlapStrategy as BranchOverlapStrategy
