"""
Integrations layer.
This package contains all code used to communicate with external systems such as:
- the SSW freight web service (quotations via cotarSite, pickups via coletar)

Key rule:
- API endpoints MUST NOT call external services directly.
- Endpoints go through the freight engine, which sends through an injected
  transport client (under src/integrations/clients).
- We use MOCK clients during development and swap to REAL_HTTP clients when
  SSW credentials are available.

Switching implementations:
- The selection of mock vs real clients happens in ONE place
  (src/api/endpoints/freight.py).
"""
