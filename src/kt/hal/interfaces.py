"""\
Interfaces for HAL representations of application objects.

"""

import re
import typing
import urllib.parse

import zope.interface
import zope.interface.common.interfaces
import zope.interface.common.mapping
import zope.schema
import zope.schema.interfaces


_rx_bad_url_chars = re.compile(r'[\x00-\x20\x7f<>"\\^`|]')
_rx_bad_escape = re.compile(r'%(?![0-9A-Fa-f]{2})')

RESERVED_KEYS = '_links', '_embedded'
"""Keys owned by the HAL envelope; payloads must not define them."""


# --------------------
# Exception interfaces


class IInvalidArgumentError(zope.interface.common.interfaces.IValueError):
    """Interface for InvalidArgumentError instances."""


class IDomainError(zope.interface.common.interfaces.IValueError):
    """Interface for DomainError instances."""


class IRenderingError(zope.interface.common.interfaces.IValueError):
    """Interface for RenderingError instances."""

    kind = zope.schema.ASCIILine(
        description='Short name for the structural problem detected',
        required=True,
    )


class IRouteAssemblyError(IRenderingError,
                          zope.interface.common.interfaces.ILookupError):
    """Interface for RouteAssemblyError instances."""

    route = zope.schema.TextLine(
        title='Route',
        description='Name of the route that could not be assembled',
        required=True,
    )

    params = zope.interface.Attribute(
        'Mapping of parameters supplied for route assembly')


class IPageOutOfRange(zope.interface.common.interfaces.IIndexError):
    """Interface for PageOutOfRange instances."""

    page = zope.schema.Int(
        title='Page',
        description='Page number requested',
        required=True,
    )

    page_count = zope.schema.Int(
        title='Page count',
        description='Number of pages available',
        required=True,
    )


# ----------
# Exceptions


@zope.interface.implementer(IInvalidArgumentError)
class InvalidArgumentError(ValueError):
    """Malformed value passed to a constructor or setter."""


@zope.interface.implementer(IDomainError)
class DomainError(ValueError):
    """Operation conflicts with the current state of the object."""


@zope.interface.implementer(IRenderingError)
class RenderingError(ValueError):
    """Resource graph cannot be rendered as a HAL document."""

    def __init__(self, message, kind):
        """Initialize with an error message and the *kind* of problem.

        *kind* is a short token such as ``'reserved-key'``,
        ``'embed-cycle'``, or ``'incomplete-link'``.

        """
        super(RenderingError, self).__init__(message)
        self.kind = kind


@zope.interface.implementer(IRouteAssemblyError)
class RouteAssemblyError(RenderingError, LookupError):
    """URL could not be assembled for a route."""

    def __init__(self, message, route, params=None):
        """Initialize with an error message, route name and parameters."""
        super(RouteAssemblyError, self).__init__(message, 'route-assembly')
        self.route = route
        self.params = dict(params or {})


@zope.interface.implementer(IPageOutOfRange)
class PageOutOfRange(IndexError):
    """Requested page is outside the range of available pages."""

    def __init__(self, page, page_count):
        super(PageOutOfRange, self).__init__(page)
        self.page = page
        self.page_count = page_count

    def __str__(self):
        return (f'page {self.page} is out of range;'
                f' {self.page_count} page(s) available')


# -----------------
# Field definitions


class InvalidURL(zope.schema.interfaces.ValidationError):
    """Value is not a valid absolute or relative URL."""


class URL(zope.schema.TextLine):

    def __init__(self, title=None, description=None, min_length=None,
                 **kwargs):
        kwargs.update(
            title=(title or 'URL'),
            description=(description or 'Absolute or relative URL'),
            min_length=(min_length or 1),
        )
        super(URL, self).__init__(**kwargs)

    def constraint(self, value):
        if (_rx_bad_url_chars.search(value) is not None
                or _rx_bad_escape.search(value) is not None):
            raise InvalidURL(value).with_field_and_value(self, value)
        try:
            parts = urllib.parse.urlsplit(value)
            # Accessing the port validates it.
            parts.port
        except ValueError:
            raise InvalidURL(value).with_field_and_value(self, value)
        if parts.scheme and not (parts.netloc or parts.path):
            raise InvalidURL(value).with_field_and_value(self, value)
        return True


# ---------------------------------------------
# Interfaces used when everything is going well


class IFieldMapping(zope.interface.common.mapping.IEnumerableMapping):
    """Mapping from field names to JSON-encodable values.

    Application records are adapted to this interface to extract the
    fields rendered for a resource.

    """


class ILink(zope.interface.Interface):
    """Description of one hypermedia relation.

    A link targets either an explicit URL or a route that is assembled
    into a URL while rendering, never both.

    """

    relation = zope.schema.TextLine(
        title='Relation',
        description='Name of the role the link plays for its resource.',
        min_length=1,
        required=True,
        readonly=True,
    )

    url = URL(
        required=False,
        missing_value=None,
    )

    route = zope.schema.TextLine(
        title='Route',
        description='Name of the route used to assemble the URL.',
        min_length=1,
        required=False,
        missing_value=None,
    )

    route_params = zope.schema.Dict(
        title='Route parameters',
        key_type=zope.schema.TextLine(),
        required=False,
    )

    route_options = zope.schema.Dict(
        title='Route options',
        key_type=zope.schema.TextLine(),
        required=False,
    )

    templated = zope.schema.Bool(
        title='Templated',
        description='''
            Indicates the target is an :rfc:`6570` URI template.  `None`
            when not specified, in which case it is not rendered.
        ''',
        required=False,
        missing_value=None,
    )

    title = zope.schema.TextLine(
        description='Human-facing title for the link.',
        min_length=1,
        required=False,
        missing_value=None,
    )

    hreflang = zope.schema.TextLine(
        description='Language of the target document (:rfc:`5646`).',
        min_length=1,
        required=False,
        missing_value=None,
    )

    def has_url() -> bool:
        """Return true if an explicit URL has been set."""

    def has_route() -> bool:
        """Return true if a route has been set."""

    def is_complete() -> bool:
        """Return true if either a URL or a route has been set."""


class ILinkCollection(zope.interface.Interface):
    """Ordered mapping from relation names to one or more links."""

    def add(link, overwrite=False):
        """Add *link* under its relation.

        If the relation is already present and *overwrite* is false, the
        relation holds all the links added for it, in order.

        """

    def get(relation, default=None):
        """Return the link or list of links for *relation*."""

    def has(relation) -> bool:
        """Return true if *relation* has at least one link."""

    def remove(relation):
        """Remove all links for *relation*."""

    def items():
        """Iterate over ``(relation, [link, ...])`` pairs in order."""


class ILinksProvider(zope.interface.Interface):

    links = zope.schema.Object(
        title='Links',
        schema=ILinkCollection,
        required=True,
        readonly=True,
    )


class IHalResource(ILinksProvider):

    payload = zope.interface.Attribute(
        'Mapping or record providing the fields of the resource')

    identifier = zope.interface.Attribute(
        'Value identifying the resource; string or integer')

    embedded = zope.interface.Attribute('''
        Mapping from relation name to an embedded resource or a
        sequence of embedded resources.
    ''')


class IPaginator(zope.interface.Interface):
    """Sequence of items split into pages of a fixed size."""

    total_items = zope.schema.Int(
        title='Total items',
        min=0,
        required=True,
        readonly=True,
    )

    page_size = zope.schema.Int(
        title='Page size',
        description='Items per page; 0 places all items on one page.',
        min=0,
        required=True,
        readonly=True,
    )

    page_count = zope.schema.Int(
        title='Page count',
        min=0,
        required=True,
        readonly=True,
    )

    def items(page: int) -> typing.Sequence:
        """Return the items of *page*, counting from 1.

        Raises :exc:`PageOutOfRange` if *page* is not available.

        """


class IHalCollection(ILinksProvider):

    items = zope.interface.Attribute(
        'Sequence of resources or records, or an IPaginator')

    collection_name = zope.schema.TextLine(
        title='Collection name',
        description='Relation under which the items are embedded.',
        min_length=1,
        required=True,
    )

    page = zope.schema.Int(
        title='Page',
        min=1,
        required=True,
    )

    page_size = zope.schema.Int(
        title='Page size',
        min=0,
        required=False,
        missing_value=None,
    )

    collection_route = zope.schema.TextLine(
        title='Collection route',
        required=False,
        missing_value=None,
    )

    collection_route_params = zope.interface.Attribute(
        'Mapping of parameters for the collection route')

    collection_route_options = zope.interface.Attribute(
        'Mapping of options for the collection route')

    attributes = zope.interface.Attribute(
        'Mapping of additional top-level fields for the collection')

    paginated = zope.schema.Bool(
        title='Paginated',
        description='Indicates whether the items are split into pages.',
        readonly=True,
    )

    def paginator() -> IPaginator:
        """Return a paginator for the items.

        Items that are not paginated are presented as a single page.

        """


class IApiProblem(zope.interface.Interface):
    """Structured description of a failed request (:rfc:`7807`)."""

    status = zope.schema.Int(
        title='Status code',
        description='HTTP status code',
        min=400,
        max=599,
        required=True,
    )

    title = zope.schema.TextLine(
        title='Title',
        description='Human-facing summary of the kind of problem',
        required=True,
    )

    detail = zope.schema.Text(
        title='Detailed description',
        description='Human-facing description of this instance of the problem',
        required=True,
    )

    type = URL(
        title='Type',
        description='URI identifying the kind of problem',
        required=True,
        default='about:blank',
    )

    detail_includes_stack_trace = zope.schema.Bool(
        title='Include stack trace',
        required=True,
        default=False,
    )

    def to_payload() -> dict:
        """Return the JSON-friendly representation of the problem."""


# -----------------------
# External collaborators


class IUrlBuilder(zope.interface.Interface):

    def assemble(route: str, params: dict, options: dict) -> str:
        """Return the URL for *route* built with *params* and *options*.

        Raises :exc:`RouteAssemblyError` for unknown routes or missing
        required parameters.

        """


class IServerUrl(zope.interface.Interface):

    def current_host_url() -> str:
        """Return the scheme and host of the current request.

        The result does not end with a slash, e.g.
        ``'https://api.example.com'``.

        """


class ISerializer(zope.interface.Interface):

    def serialize(value) -> str:
        """Serialize a JSON-compatible value to text."""
