import unittest

import httpx

from factories import snapshot_json
from vax_alert.config import DEFAULT_DASHBOARD_URL
from vax_alert.dashboard import DashboardClient
from vax_alert.errors import DecodeError, FetchError


class DashboardClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_fetch_snapshot_decodes_body(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, text=snapshot_json())

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            snapshot = await DashboardClient(client=http).fetch_snapshot()

        self.assertEqual(seen, [DEFAULT_DASHBOARD_URL])
        self.assertEqual(snapshot.locations[0].name, "Clinic A")

    async def test_non_success_status_raises_fetch_error(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(404))

        async with httpx.AsyncClient(transport=transport) as http:
            with self.assertRaises(FetchError) as ctx:
                await DashboardClient(client=http).fetch()

        self.assertIn("404", str(ctx.exception))

    async def test_network_error_raises_fetch_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            with self.assertRaises(FetchError):
                await DashboardClient(client=http).fetch()

    async def test_bad_payload_raises_decode_error(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="[]"))

        async with httpx.AsyncClient(transport=transport) as http:
            with self.assertRaises(DecodeError):
                await DashboardClient(client=http).fetch_snapshot()

    async def test_session_leaves_borrowed_client_open(self) -> None:
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        dashboard = DashboardClient(client=http)

        async with dashboard.session():
            pass

        self.assertFalse(http.is_closed)
        await http.aclose()

    async def test_session_closes_own_client(self) -> None:
        dashboard = DashboardClient()
        http = dashboard.client

        async with dashboard.session():
            pass

        self.assertTrue(http.is_closed)


if __name__ == "__main__":
    unittest.main()
