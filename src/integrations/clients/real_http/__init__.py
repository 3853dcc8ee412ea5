"""
Real HTTP integration clients.

These clients communicate with real external systems via HTTP, e.g.:
- the SSW sswCotacaoColeta SOAP endpoint

Important:
- Must implement the same interface as the mock clients (SoapTransport)
- Must return the raw reply text; decoding belongs to src/integrations/freight

Switching:
The selection of mock vs real clients happens in src/api/endpoints/freight.py only.
"""
