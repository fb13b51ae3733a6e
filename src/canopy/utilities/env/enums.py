from enum import StrEnum


class BranchOverlapStrategy(StrEnum):
    OFF = "off"
    ALWAYS = "always"
    AFTER_WARMUP = "after_warmup"
