"""
Audience Lens core package.

Modules
───────
models     — Pydantic data models (Audience, ResearchResult, chart items, …)
errors     — Exception taxonomy shared by the store, gateway and web layer
storage    — SQLite-backed string-keyed blob store (the persistence medium)
audiences  — Audience CRUD over a single serialised blob (list, get, create, …)
prompts    — Static instruction texts and prompt builders per research variant
parsing    — Citation de-duplication and fenced-JSON parsing
gateway    — Claude + web_search tool: one grounded call per research request
dashboard  — Fan-out of the fixed audience dashboard questions
"""
