from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
import httpx

# (filename, content, content type) as accepted by httpx multipart
UploadTuple = Tuple[str, bytes, str]


class ApiError(Exception):
    """A non-2xx response, carrying the server's message when it sent one"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class WallApiClient:
    """
    Async HTTP client for the wall API.

    token_provider is consulted on every request so the bearer header always
    reflects what the session repository currently holds.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        **client_kwargs: Any,
    ):
        self.token_provider = token_provider
        self._client = httpx.AsyncClient(base_url=base_url, **client_kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "WallApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _headers(self) -> Dict[str, str]:
        token = self.token_provider() if self.token_provider else None
        if token and token.strip():
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            # Connection-level failures carry no status; surfaced with status 0
            raise ApiError(0, str(e)) from e
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        try:
            return response.json()
        except ValueError as e:
            # e.g. an HTML page from a proxy in front of the API
            raise ApiError(response.status_code, "Invalid response from server") from e

    # auth

    async def register(self, email: str, password: str) -> Dict[str, Any]:
        return await self._request("POST", "/auth/register", json={"email": email, "password": password})

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        return await self._request("POST", "/auth/login", json={"email": email, "password": password})

    async def me(self) -> Dict[str, Any]:
        return await self._request("GET", "/auth/me")

    # profile

    async def get_profile(self, profile_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/profile/{profile_id}")

    async def update_profile(self, profile_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/profile/{profile_id}", json=data)

    async def upload_avatar(self, profile_id: int, upload: UploadTuple) -> Dict[str, Any]:
        return await self._request("POST", f"/profile/{profile_id}/avatar", files={"file": upload})

    # posts

    async def list_posts(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params = {"limit": limit, "offset": offset, "sort": sort, "userId": user_id}
        return await self._request("GET", "/posts", params={k: v for k, v in params.items() if v is not None})

    async def create_post(
        self,
        text: str,
        images: Iterable[UploadTuple] = (),
        existing_images: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        data: Dict[str, Any] = {"text": text}
        if existing_images is not None:
            data["existingImages"] = existing_images
        return await self._request("POST", "/posts", data=data, files=_image_files(images))

    async def update_post(
        self,
        post_id: int,
        text: Optional[str] = None,
        images: Iterable[UploadTuple] = (),
        existing_images: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if text is not None:
            data["text"] = text
        if existing_images is not None:
            # A lone empty value tells the server to clear the image list
            data["existingImages"] = existing_images or [""]
        return await self._request("PUT", f"/posts/{post_id}", data=data, files=_image_files(images))

    async def delete_post(self, post_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"/posts/{post_id}")


def _image_files(images: Iterable[UploadTuple]) -> Optional[List[Tuple[str, UploadTuple]]]:
    files = [("images", image) for image in images]
    return files or None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    return response.reason_phrase or f"HTTP {response.status_code}"
