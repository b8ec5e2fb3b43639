"""HTTP access to the Weave router."""

from weaveapi.router.client import RouterClient  # noqa: F401
