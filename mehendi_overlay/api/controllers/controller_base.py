from typing import Dict, List, Optional

from fastapi.routing import APIRouter

ERROR_DESCRIPTIONS: Dict[int, str] = {
    400: "The image source could not be loaded or decoded.",
    429: "Too many requests from this client; see Retry-After.",
    500: "A pipeline stage failed unexpectedly.",
    503: "No rendering surface could be allocated for the image.",
}


class ControllerBase:
    """Router holder; the route prefix and tag default to the class name without ``Controller``."""

    def __init__(self, prefix: Optional[str] = None, tags: Optional[List[str]] = None):
        self.name = self.__class__.__name__.removesuffix("Controller")
        if prefix is None:
            prefix = f"/{self.name}"
        else:
            prefix = "/" + prefix.strip("/")
        tags = [*(tags or []), self.name]

        self.router = APIRouter(prefix=prefix, tags=tags)

    @staticmethod
    def error_responses(*status_codes: int) -> Dict[int, dict]:
        """OpenAPI ``responses`` entries for the overlay error statuses a route can return."""

        return {code: {"description": ERROR_DESCRIPTIONS[code]} for code in status_codes}
