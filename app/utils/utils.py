import json
from typing import Any, Dict, List

import requests

from app.utils.exceptions import ExternalServiceError, ModelError

AI_SERVICE_NAME = "openai"


def chat_completion(
    prompt: str,
    *,
    api_key: str,
    base_url: str,
    model: str,
    temperature: float = 0.3,
    max_tokens: int = 500,
    timeout: float = 30,
    session: requests.Session = None,
) -> str:
    """Send a single-message chat completion and return the reply text."""
    http = session or requests
    url = f"{base_url}/chat/completions"
    try:
        resp = http.post(
            url,
            headers={"Authorization": f"Bearer {api_key}"},
            json={
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": max_tokens,
                "temperature": temperature,
            },
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise ExternalServiceError(
            f"AI backend request failed: {e.__class__.__name__}",
            service_name=AI_SERVICE_NAME,
            cause=e,
        ) from e

    if not 200 <= resp.status_code < 300:
        raise ExternalServiceError(
            f"AI backend returned HTTP {resp.status_code}",
            service_name=AI_SERVICE_NAME,
            status_code=resp.status_code,
        )

    try:
        data = resp.json()
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError):
        content = None
    if not content or not isinstance(content, str):
        raise ModelError("No response from AI backend", model_name=model)
    return content


def parse_json_object(s: str) -> Dict[str, Any]:
    """Parse the JSON object in ``s``, tolerating prose or code fences around it."""
    start = s.find("{")
    end = s.rfind("}")
    if start < 0 or end < start:
        raise ModelError("Invalid JSON response from AI backend")
    try:
        data = json.loads(s[start:end + 1])
    except ValueError as e:
        raise ModelError("Invalid JSON response from AI backend", cause=e) from e
    if not isinstance(data, dict):
        raise ModelError("Invalid JSON response from AI backend")
    return data


def as_non_negative_int(x: Any, default: int = 0) -> int:
    if isinstance(x, bool):
        return default
    try:
        return max(0, int(round(float(x))))
    except (TypeError, ValueError, OverflowError):
        return default


def as_str_list(x: Any) -> List[str]:
    if x is None:
        return []
    if isinstance(x, str):
        parts = [p.strip() for p in x.replace(";", ",").split(",")]
        return [p for p in parts if p]
    if isinstance(x, list):
        return [str(t).strip() for t in x if str(t).strip()]
    return []
