"""
Mock integration clients.

These clients return fake (but realistically shaped) replies without calling any external API.
They are used when:
- SSW credentials are not configured
- We want to test the freight endpoints end-to-end without network access

Important:
- Mock clients must follow the SAME interface as real HTTP clients (SoapTransport).
- Mock replies must use the same SOAP shape SSW answers with.

Switching to real:
Set INTEGRATIONS_MODE=real (or leave it unset) to use clients/real_http/* instead.
"""
