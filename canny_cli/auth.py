"""
`canny auth`: show and verify the configured credentials, or prompt for new
ones and save them to the OS credential store.
"""

from canny_cli import config, credentials
from canny_cli.api import _mask_api_key
from canny_cli.client import CannyClient
from canny_cli.exceptions import CliError, SetupError, ValidationError


def _clean_subdomain(raw):
    """Accept ``acme``, ``acme.canny.io``, or a pasted URL."""
    value = raw.strip().lower()
    if "://" in value:
        value = value.split("://", 1)[1]
    if ".canny.io" in value:
        value = value.split(".canny.io", 1)[0]
    return value.strip("/")


def _show_status(api_key, api_url):
    print("Canny CLI")
    print()
    print(f"  API URL: {api_url}")
    print(f"  API key: {_mask_api_key(api_key)}")
    print("  Verifying...", end="", flush=True)
    try:
        boards = CannyClient(api_url, api_key).list_boards()
    except CliError as e:
        print(f"\r  ✗ Authentication failed: {e}")
        print("\n  Run `canny auth --reset` to re-authenticate.")
        return
    plural = "" if len(boards) == 1 else "s"
    print(f"\r  ✓ Authenticated ({len(boards)} board{plural})   ")


def _prompt_and_store(store=None):
    print("Canny CLI Authentication")
    print()
    subdomain = _clean_subdomain(
        input("  Subdomain (e.g. 'mycompany' for mycompany.canny.io) [canny.io]: ")
    )
    api_url = f"https://{subdomain}.canny.io/api/v1" if subdomain else config.DEFAULT_API_URL

    api_key = input("  API key: ").strip()
    if not api_key:
        raise ValidationError("API key cannot be empty")

    credentials.store_api_key(api_key, store)
    credentials.store_api_url(api_url, store)
    print()
    print("  ✓ Credentials saved to credential store.")
    print(f"  API URL: {api_url}")


def cmd_auth(ns, store=None):
    """Show the active credentials, or prompt for new ones when none resolve.

    With ``--reset`` the stored key and URL are deleted first, so the prompt
    runs unless a key still comes from --api-key or CANNY_API_KEY.
    """
    if ns.reset:
        try:
            credentials.clear_stored_credentials(store)
        except SetupError as e:
            print(f"  {e}.")
        else:
            print("  ✓ Credentials cleared.")
        print()

    try:
        api_key = credentials.resolve_api_key(getattr(ns, "api_key", None), store)
    except SetupError:
        _prompt_and_store(store)
        return
    _show_status(api_key, credentials.resolve_api_url(getattr(ns, "api_url", None), store))
