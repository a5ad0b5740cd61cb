from .calibrator import calculate, calculate_file, calculate_source, initial_block_size
from .comparator import (
    compare,
    compare_text,
    eliminate_sequences,
    has_common_substring,
    score_strings,
)
from .edit_distance import edit_distance
from .generator import GenerationContext, generate
from .rolling import RollingState, roll

__all__ = [
    "GenerationContext",
    "RollingState",
    "calculate",
    "calculate_file",
    "calculate_source",
    "compare",
    "compare_text",
    "edit_distance",
    "eliminate_sequences",
    "generate",
    "has_common_substring",
    "initial_block_size",
    "roll",
    "score_strings",
]
