import logging

from domain_finder.models import Failed, Outcome
from domain_finder.search import DUCKDUCKGO, SearchProvider

log = logging.getLogger(__name__)


async def lookup(session, name: str, provider: SearchProvider = DUCKDUCKGO) -> Outcome:
    """
    Search for ``name`` in an open session and read the first result.

    Any navigation or session error is logged and returned as a Failed
    outcome; this coroutine does not raise. The session is neither opened nor
    closed here.
    """
    query_url = provider.query_url(name)
    try:
        await session.goto(query_url)
        html = await session.content()
        resolution = provider.extract(html, session.url or query_url)
    except Exception as e:
        log.error('Error searching %s for "%s": %s', provider.name, name, e)
        return Outcome(name, Failed(str(e)))

    log.debug("%s: %s -> %s", provider.name, name, resolution)
    return Outcome(name, resolution)
