"""Client utilities for the Gemini API with Google Maps and Search grounding."""

import logging

from google import genai
from google.genai import types

from address_finder.core.errors import UpstreamError

logger = logging.getLogger(__name__)
_SERVICE = "gemini"


def _build_client(api_key: str, timeout: float) -> genai.Client:
    # HttpOptions.timeout is in milliseconds.
    return genai.Client(api_key=api_key, http_options=types.HttpOptions(timeout=int(timeout * 1000)))


def build_grounding_config(latitude: float, longitude: float) -> types.GenerateContentConfig:
    """Request map lookup plus web search, anchored at the given coordinates."""
    return types.GenerateContentConfig(
        tools=[
            types.Tool(google_maps=types.GoogleMaps()),
            types.Tool(google_search=types.GoogleSearch()),
        ],
        tool_config=types.ToolConfig(
            retrieval_config=types.RetrievalConfig(
                lat_lng=types.LatLng(latitude=latitude, longitude=longitude),
            ),
        ),
    )


def generate_grounded_text(
    prompt: str,
    latitude: float,
    longitude: float,
    *,
    api_key: str,
    model: str,
    timeout: float = 10,
) -> str:
    """Send *prompt* with grounding tools enabled and return the response text.

    An empty response is returned as ``""``; only transport and API failures
    raise UpstreamError.
    """
    if not api_key:
        raise UpstreamError(_SERVICE, "GEMINI_API_KEY is not configured")

    logger.info("Calling Gemini model=%s for lat=%s lon=%s", model, latitude, longitude)
    try:
        client = _build_client(api_key, timeout)
        response = client.models.generate_content(
            model=model,
            contents=prompt,
            config=build_grounding_config(latitude, longitude),
        )
    except Exception as exc:  # noqa: BLE001 - SDK raises several unrelated transport errors
        logger.warning("Gemini request failed: %s", exc)
        raise UpstreamError(_SERVICE, str(exc)) from exc

    text = response.text or ""
    if not text:
        logger.warning("Gemini returned an empty response for lat=%s lon=%s", latitude, longitude)
    return text
