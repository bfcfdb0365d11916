from typing import Any, Dict

from langfuse import observe


@observe()
def track_prediction(mode: str, payload: Dict[str, Any], result: Dict[str, Any]) -> Dict[str, Any]:
    return {"mode": mode, "input": payload, "output": result}
