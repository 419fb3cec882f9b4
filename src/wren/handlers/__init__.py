"""Handlers: the request chain.

Every request passes through the app's global handler chain, then the
matched route's local chain, then the view method:

    BaseHandler -- contract every chain link implements
    ExceptionHandler -- mandatory safety net, maps failures to responses
    ParameterHandler -- resolves view arguments from the request
    HandlerPool -- reuses handler instances across requests
    Composer -- builds and drives the continuation chain
"""

from wren.handlers.base import BaseHandler, HandlerType, Next, RequestContext
from wren.handlers.composer import Composer, Phase
from wren.handlers.exception import ExceptionHandler
from wren.handlers.parameter import ParameterHandler
from wren.handlers.pool import HandlerPool

__all__ = [
    "BaseHandler",
    "Composer",
    "ExceptionHandler",
    "HandlerPool",
    "HandlerType",
    "Next",
    "ParameterHandler",
    "Phase",
    "RequestContext",
]
