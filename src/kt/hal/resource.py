"""\
HAL resources and collections wrapping application data.

Application code builds these, attaches links and embedded resources,
and hands them to the renderer.  Rendering never modifies them.

"""

import collections.abc
import typing

import zope.interface

import kt.hal.interfaces
import kt.hal.link
import kt.hal.paginator


def _check_page(page):
    if isinstance(page, bool) or not isinstance(page, int):
        raise kt.hal.interfaces.InvalidArgumentError(
            f'page must be an integer; received {page!r}')
    return page


@zope.interface.implementer(kt.hal.interfaces.IHalResource)
class HalResource:
    """Resource wrapping a payload and the identifier of the entity."""

    def __init__(self,
                 payload: typing.Any,
                 identifier: typing.Union[str, int],
                 links: typing.Iterable = ()):
        """Initialize resource.

        :param payload:
            Mapping or record providing the fields of the resource.
            Records are converted to mappings while rendering, by
            adaptation to :class:`~kt.hal.interfaces.IFieldMapping` if
            possible, otherwise from their public attributes.
        :param identifier:
            Value of the identifier field of the resource.
        :param links:
            Initial links for the resource.

        """
        if payload is None or isinstance(payload, (str, bytes, int, float)):
            raise kt.hal.interfaces.InvalidArgumentError(
                f'resource payload must be a mapping or record;'
                f' received {type(payload).__name__!r}')
        if (isinstance(identifier, bool)
                or not isinstance(identifier, (str, int))):
            raise kt.hal.interfaces.InvalidArgumentError(
                f'resource identifier must be a string or integer;'
                f' received {identifier!r}')
        self.payload = payload
        self.identifier = identifier
        self.links = kt.hal.link.LinkCollection(links)
        self._embedded = {}

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.identifier!r}>'

    @property
    def embedded(self):
        return dict(self._embedded)

    def embed(self, relation, resource):
        """Embed a resource or a sequence of resources under *relation*.

        Embedding replaces anything previously embedded for *relation*.

        """
        if not isinstance(relation, str) or not relation:
            raise kt.hal.interfaces.InvalidArgumentError(
                f'embedded relation must be a non-empty string;'
                f' received {relation!r}')
        if isinstance(resource, (list, tuple)):
            resource = [kt.hal.interfaces.IHalResource(ob)
                        for ob in resource]
        else:
            resource = kt.hal.interfaces.IHalResource(resource)
        self._embedded[relation] = resource
        return self


@zope.interface.implementer(kt.hal.interfaces.IHalCollection)
class HalCollection:
    """Collection of resources or records, possibly paginated."""

    def __init__(self,
                 items,
                 collection_name: str = 'items',
                 page: int = 1,
                 page_size: typing.Optional[int] = None,
                 collection_route: typing.Optional[str] = None,
                 collection_route_params: typing.Optional[dict] = None,
                 collection_route_options: typing.Optional[dict] = None,
                 attributes: typing.Optional[dict] = None):
        """Initialize collection.

        :param items:
            Sequence of :class:`HalResource` objects or raw records, or
            an object providing :class:`~kt.hal.interfaces.IPaginator`.
        :param collection_name:
            Relation under which the items are embedded.
        :param page:
            Requested page, counting from 1.  This usually comes from
            the client, so it is only checked against the available
            pages while rendering.
        :param page_size:
            Number of items per page.  If given for a plain sequence,
            the sequence is paginated; if given with a paginator, it
            must match the page size of the paginator.
        :param collection_route:
            Route used to build the ``self`` and navigation links.
        :param collection_route_params:
            Route parameters for the collection route; the page number
            is added for navigation links.
        :param collection_route_options:
            Route options for the collection route.
        :param attributes:
            Additional top-level fields for the rendered collection.

        """
        if isinstance(items, (str, bytes, collections.abc.Mapping)):
            raise kt.hal.interfaces.InvalidArgumentError(
                f'collection items must be a sequence or paginator;'
                f' received {type(items).__name__!r}')
        if not isinstance(collection_name, str) or not collection_name:
            raise kt.hal.interfaces.InvalidArgumentError(
                f'collection name must be a non-empty string;'
                f' received {collection_name!r}')
        paginator = kt.hal.interfaces.IPaginator(items, None)
        if paginator is not None:
            if page_size is not None and page_size != paginator.page_size:
                raise kt.hal.interfaces.InvalidArgumentError(
                    f'page size {page_size} conflicts with paginator'
                    f' page size {paginator.page_size}')
            items = paginator
        elif page_size is not None:
            items = kt.hal.paginator.Paginator(items, page_size)
        elif not isinstance(items, collections.abc.Sequence):
            items = tuple(items)
        self.items = items
        self.collection_name = collection_name
        self.page = _check_page(page)
        self.collection_route = collection_route
        self.collection_route_params = dict(collection_route_params or {})
        self.collection_route_options = dict(collection_route_options or {})
        self.attributes = dict(attributes or {})
        self.links = kt.hal.link.LinkCollection()

    @property
    def paginated(self):
        return kt.hal.interfaces.IPaginator.providedBy(self.items)

    @property
    def page_size(self):
        if self.paginated:
            return self.items.page_size
        return None

    def paginator(self):
        """Return a paginator for the items.

        Unpaginated items are presented as a single page.

        """
        if self.paginated:
            return self.items
        return kt.hal.paginator.Paginator(self.items, 0)
