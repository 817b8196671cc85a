"""OpenBeta GraphQL API client.

Fetches nested area -> sub-area -> wall -> climb trees by area (or state) name.

OpenBeta data is licensed under CC BY-SA 4.0.
https://openbeta.io
"""
import structlog
import time
import requests
from dataclasses import dataclass, field
from typing import Callable, Optional
from tenacity import Retrying, stop_after_attempt, wait_exponential, retry_if_exception_type

from tufo.config import Settings, get_settings
from tufo.errors import GraphQLError, TransientFetchError

log = structlog.get_logger()

CLIMB_FIELDS = """
    name
    uuid
    type {
        trad
        sport
        bouldering
        tr
    }
    grades {
        yds
    }
    metadata {
        lat
        lng
    }
    content {
        description
    }
    media {
        mediaUrl
    }
"""


@dataclass
class OpenBetaClimb:
    """OpenBeta climb (route or boulder problem)."""
    uuid: str
    name: str
    trad: bool = False
    sport: bool = False
    bouldering: bool = False
    tr: bool = False
    yds: Optional[str] = None
    description: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    media_urls: list[str] = field(default_factory=list)


@dataclass
class OpenBetaArea:
    """OpenBeta area node with its nested children and climbs."""
    uuid: str
    name: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    children: list["OpenBetaArea"] = field(default_factory=list)
    climbs: list[OpenBetaClimb] = field(default_factory=list)


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


def _as_float(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_climb(node: dict) -> OpenBetaClimb:
    """Build a climb from a raw payload node, tolerating missing fields."""
    node = _as_dict(node)
    flags = _as_dict(node.get("type"))
    metadata = _as_dict(node.get("metadata"))

    media_urls = []
    for item in _as_list(node.get("media")):
        url = _as_text(_as_dict(item).get("mediaUrl"))
        if url:
            media_urls.append(url)

    return OpenBetaClimb(
        uuid=_as_text(node.get("uuid")) or "",
        name=_as_text(node.get("name")) or "",
        trad=bool(flags.get("trad")),
        sport=bool(flags.get("sport")),
        bouldering=bool(flags.get("bouldering")),
        tr=bool(flags.get("tr")),
        yds=_as_text(_as_dict(node.get("grades")).get("yds")),
        description=_as_text(_as_dict(node.get("content")).get("description")),
        lat=_as_float(metadata.get("lat")),
        lng=_as_float(metadata.get("lng")),
        media_urls=media_urls,
    )


def parse_area(node: dict) -> OpenBetaArea:
    """Recursively build an area tree from a raw payload node."""
    node = _as_dict(node)
    metadata = _as_dict(node.get("metadata"))

    return OpenBetaArea(
        uuid=_as_text(node.get("uuid")) or "",
        name=_as_text(node.get("area_name")) or "",
        lat=_as_float(metadata.get("lat")),
        lng=_as_float(metadata.get("lng")),
        children=[parse_area(child) for child in _as_list(node.get("children"))],
        climbs=[parse_climb(climb) for climb in _as_list(node.get("climbs"))],
    )


class OpenBetaClient:
    """
    Client for the OpenBeta GraphQL API.

    Transport failures are retried with exponential backoff; a fixed
    politeness delay separates consecutive fetches.
    """

    # Area -> sub-areas -> walls
    TREE_DEPTH = 2

    def __init__(
        self,
        api_url: str,
        timeout: float = 30.0,
        max_attempts: int = 3,
        backoff_multiplier: float = 2.0,
        request_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.backoff_multiplier = backoff_multiplier
        self.request_delay = request_delay
        self._sleep = sleep
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "User-Agent": "Tufo/1.0 (climbing route catalog)",
        })
        self._request_count = 0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "OpenBetaClient":
        settings = settings or get_settings()
        return cls(
            api_url=settings.openbeta_api_url,
            timeout=settings.openbeta_timeout_seconds,
            max_attempts=settings.import_max_attempts,
            backoff_multiplier=settings.import_backoff_multiplier,
            request_delay=settings.request_delay_seconds,
            **kwargs,
        )

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def search_areas(self, name: str) -> list[OpenBetaArea]:
        """
        Fetch every area whose name matches, with its nested tree.

        Raises:
            TransientFetchError: all attempts failed
            GraphQLError: the API rejected the query
        """
        query = f"""
        query SearchArea($name: String!) {{
            areas(filter: {{ area_name: {{ match: $name }} }}) {{
                {self._build_area_fragment(self.TREE_DEPTH)}
            }}
        }}
        """

        raw_areas = self._query_with_retry(query, {"name": name})
        areas = [parse_area(node) for node in raw_areas]

        log.info("openbeta_areas_found", name=name, count=len(areas))
        return areas

    def _build_area_fragment(self, depth: int) -> str:
        """Build area fields with nested children down to ``depth`` levels."""
        children = ""
        if depth > 0:
            children = f"""
            children {{
                {self._build_area_fragment(depth - 1)}
            }}
            """

        return f"""
            area_name
            uuid
            metadata {{ lat lng }}
            climbs {{ {CLIMB_FIELDS} }}
            {children}
        """

    def _query_with_retry(self, query: str, variables: dict) -> list:
        # Politeness delay between consecutive fetches (not before the first)
        if self._request_count and self.request_delay > 0:
            self._sleep(self.request_delay)
        self._request_count += 1

        retryer = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_multiplier),
            retry=retry_if_exception_type(TransientFetchError),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        return retryer(self._query, query, variables)

    def _log_retry(self, retry_state):
        log.warning(
            "openbeta_fetch_retry",
            attempt=retry_state.attempt_number,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
            error=str(retry_state.outcome.exception()),
        )

    def _query(self, query: str, variables: dict) -> list:
        """Execute a GraphQL query and return ``data.areas``."""
        payload = {"query": query, "variables": variables}

        try:
            response = self.session.post(self.api_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransientFetchError(f"OpenBeta request failed: {e}") from e

        if not response.ok:
            raise TransientFetchError(f"OpenBeta returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise TransientFetchError("OpenBeta returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise TransientFetchError("OpenBeta returned a malformed payload")

        if data.get("errors"):
            log.error("graphql_error", errors=data["errors"])
            raise GraphQLError(data["errors"])

        areas = _as_dict(data.get("data")).get("areas")
        if not isinstance(areas, list):
            raise TransientFetchError("OpenBeta payload is missing data.areas")

        return areas
