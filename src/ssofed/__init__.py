"""ssofed - OAuth2 authorization-code federation against an external SSO service.

The package authenticates an end user against a third-party identity service and
converts its profile into a canonical user record for the host application.

## Quick Example

```python
from ssofed.auth import SsoLoginFlow, InMemorySession, resolve_provider_config
from ssofed.config import load_config_source

config = resolve_provider_config(load_config_source())
flow = SsoLoginFlow(config)

session = InMemorySession({"nonce": "n-123"})
request = flow.start(session, state="opaque-state")
# redirect the browser to request.url ...

user = await flow.complete(session, code="code-from-callback")
print(user.id, user.email)
```
"""

__version__ = "0.1.0"
