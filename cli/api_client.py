"""REST API client for jargon server."""

import requests
from typing import Optional


class JargonAPIClient:
    """Client for communicating with the jargon REST API."""

    def __init__(self, base_url: str = "http://localhost:8000", user_id: str = "default"):
        self.base_url = base_url.rstrip('/')
        self.user_id = user_id
        self.session = requests.Session()

    def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make a GET request."""
        if params is None:
            params = {}
        params['user_id'] = self.user_id
        response = self.session.get(f"{self.base_url}{endpoint}", params=params)
        response.raise_for_status()
        return response.json()

    def _post(self, endpoint: str, data: dict = None) -> dict:
        """Make a POST request."""
        if data is None:
            data = {}
        data['user_id'] = self.user_id
        response = self.session.post(f"{self.base_url}{endpoint}", json=data)
        response.raise_for_status()
        return response.json()

    def health_check(self) -> dict:
        """Check if the server is running."""
        response = self.session.get(f"{self.base_url}/")
        response.raise_for_status()
        return response.json()

    def get_status(self) -> dict:
        """Get data load status."""
        return self._get("/api/status")

    def get_rarities(self) -> dict:
        return self._get("/api/rarities")

    def get_patterns(self, query: Optional[str] = None, length: Optional[int] = None,
                     rarity: Optional[str] = None, page: Optional[int] = None) -> dict:
        """Get one page of patterns under the given filters."""
        params = {}
        if query:
            params['query'] = query
        if length is not None:
            params['length'] = length
        if rarity:
            params['rarity'] = rarity
        if page is not None:
            params['page'] = page
        return self._get("/api/patterns", params)

    def next_page(self) -> dict:
        return self._post("/api/patterns/next")

    def previous_page(self) -> dict:
        return self._post("/api/patterns/previous")

    def toggle_expand(self, pattern: str) -> dict:
        """Show or hide a pattern's word lists; returns the current page."""
        return self._post("/api/patterns/expand", {'pattern': pattern})

    def get_pattern(self, pattern: str) -> dict:
        """Get the word lists of a single pattern."""
        return self._get(f"/api/patterns/{pattern}")

    def get_drills(self) -> dict:
        return self._get("/api/drills")

    def set_drill_filters(self, side: str = 'all', query: Optional[str] = None) -> dict:
        return self._post("/api/drills/filter", {'side': side, 'query': query})

    def get_session(self) -> dict:
        return self._get("/api/session")

    def toggle_selection(self, key: str) -> dict:
        return self._post("/api/session/select", {'key': key})

    def select_all(self) -> dict:
        return self._post("/api/session/select-all")

    def clear_selection(self) -> dict:
        return self._post("/api/session/clear")

    def start_session(self, mode: str = 'find') -> dict:
        return self._post("/api/session/start", {'mode': mode})

    def submit_answer(self, answer: str) -> dict:
        """Submit a guess or a repetition; returns {result, session}."""
        return self._post("/api/session/guess", {'answer': answer})

    def reveal(self) -> dict:
        return self._post("/api/session/reveal")

    def skip(self) -> dict:
        return self._post("/api/session/skip")

    def next_challenge(self) -> dict:
        return self._post("/api/session/next")

    def reset_session(self) -> dict:
        return self._post("/api/session/reset")
