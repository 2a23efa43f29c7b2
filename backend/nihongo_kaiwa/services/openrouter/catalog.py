"""Known free models on OpenRouter."""
from enum import Enum
from typing import List, Optional


class FreeModel(str, Enum):
    """Free model identifiers as known to OpenRouter."""
    GEMMA_3_4B = "google/gemma-3-4b-it:free"
    LLAMA_3_2_1B = "meta-llama/llama-3.2-1b-preview"
    LLAMA_3_2_3B = "meta-llama/llama-3.2-3b-preview"
    PHI_3_MINI = "microsoft/phi-3-mini-4k-instruct"
    CODEGEEX_4 = "thudm/codegeex4-all-9b"


DEFAULT_MODEL = FreeModel.GEMMA_3_4B


def list_free_models() -> List[str]:
    """Return all free model identifiers, default first."""
    return [DEFAULT_MODEL.value] + [m.value for m in FreeModel if m is not DEFAULT_MODEL]


def find_free_model(model_id: str) -> Optional[FreeModel]:
    """Look up a free model by identifier, or None when it is not in the catalog."""
    try:
        return FreeModel(model_id)
    except ValueError:
        return None
