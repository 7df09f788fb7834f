import re
from typing import Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, quote, urlencode

from awskit.core.exceptions import InvalidArgument

QueryValue = Union[str, List[str]]

_uri_template_pattern = re.compile(r"\{([^}+]+)(\+?)\}")


def build_uri(template: str, params: Mapping[str, str]) -> str:
    """
    Expands a REST URI template like ``/2017-08-29/jobs/{Id}`` or ``/{Bucket}/{Key+}``. Values of simple labels are
    fully percent-encoded, greedy labels (``{Key+}``) keep their slashes.

    :param template: the request URI template of the operation (without the static querystring)
    :param params: label name to (already stringified) value
    :return: the expanded path
    :raises InvalidArgument: if a label has no value
    """

    def _replace(match: re.Match) -> str:
        name, greedy = match.group(1), match.group(2)
        value = params.get(name)
        if value is None:
            raise InvalidArgument(f'Missing value for the URI label "{name}" of "{template}".')
        return quote(value, safe="/~" if greedy else "~")

    return _uri_template_pattern.sub(_replace, template)


def split_request_uri(request_uri: str) -> Tuple[str, Dict[str, str]]:
    """
    Splits a modeled request URI (``/{Bucket}?uploads``) into the path template and its static query parameters.
    """
    path, _, query = request_uri.partition("?")
    return path or "/", dict(parse_qsl(query, keep_blank_values=True))


class Request:
    """
    A service request as it is rendered by a generated input: the HTTP method, the path, the querystring, the headers
    and the (already encoded) body. The endpoint is set by the client right before the request is sent.
    """

    method: str
    uri: str
    query: Dict[str, QueryValue]
    headers: Dict[str, str]
    body: Union[str, bytes]
    endpoint: Optional[str]

    def __init__(
        self,
        method: str,
        uri: str,
        query: Optional[Dict[str, QueryValue]] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Union[str, bytes] = "",
    ):
        self.method = method
        self.uri = uri
        self.query = dict(query or {})
        self.headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.body = body
        self.endpoint = None

    def has_header(self, name: str) -> bool:
        return name.lower() in self.headers

    def get_header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    def set_header(self, name: str, value: str) -> None:
        self.headers[name.lower()] = value

    def url(self) -> str:
        """
        Returns the full URL of this request: endpoint, path and querystring.
        """
        if not self.endpoint:
            raise InvalidArgument("The request has no endpoint.")
        url = self.endpoint.rstrip("/") + self.uri
        if self.query:
            url += "?" + urlencode(self.query, doseq=True, quote_via=quote)
        return url

    def __repr__(self):
        return f"Request({self.method} {self.endpoint or ''}{self.uri})"
