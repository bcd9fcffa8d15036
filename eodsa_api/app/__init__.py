"""
Application package initializer.

The project is organised by layer: ``core`` holds configuration,
persistence, security and error handling; ``schemas`` holds the
pydantic request/response models; ``services`` holds the business
rules; ``api/v1/endpoints`` exposes one router per domain (dancers,
studios, events, entries, scores and so on).  Routers are aggregated in
``api/v1/router.py`` and mounted by ``main.create_app``.
"""
