"""Tests for the vPIC and CarQuery clients."""

import asyncio

import httpx
import pytest

from ingestion import carquery, vpic

BASE_URL = "https://vpic.test/api/vehicles"


def make_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)


def run(coro_factory, handler):
    async def go():
        async with make_client(handler) as client:
            return await coro_factory(client)

    return asyncio.run(go())


class TestGetJson:
    """get_json() retry behavior."""

    def test_retries_transient_status(self):
        """A 503 followed by a 200 succeeds on the second attempt."""
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(503)
            return httpx.Response(200, json={"Results": []})

        data = run(lambda c: vpic.get_json(c, "/GetAllMakes?format=json", backoff_s=0), handler)
        assert data == {"Results": []}
        assert len(calls) == 2

    def test_retries_network_errors(self):
        """Connection errors are retried too."""
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                raise httpx.ConnectError("connection reset", request=request)
            return httpx.Response(200, json={"Results": []})

        run(lambda c: vpic.get_json(c, "/GetAllMakes?format=json", backoff_s=0), handler)
        assert len(calls) == 3

    def test_gives_up_after_tries(self):
        """A persistent 503 raises VpicError after the configured attempts."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        with pytest.raises(vpic.VpicError):
            run(lambda c: vpic.get_json(c, "/GetAllMakes?format=json", tries=3, backoff_s=0), handler)
        assert len(calls) == 3

    def test_client_errors_are_not_retried(self):
        """A 404 fails immediately."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404)

        with pytest.raises(vpic.VpicError):
            run(lambda c: vpic.get_json(c, "/Nope", backoff_s=0), handler)
        assert len(calls) == 1


class TestMakesAndModels:
    """get_all_makes() / get_models_for_make_year()."""

    def test_makes_are_normalized_and_unique(self):
        """Whitespace is collapsed and duplicates dropped."""

        def handler(request):
            return httpx.Response(
                200,
                json={
                    "Results": [
                        {"Make_ID": 474, "Make_Name": "HONDA"},
                        {"Make_ID": 474, "Make_Name": "Honda "},
                        {"Make_ID": 1684, "Make_Name": "LAND  ROVER"},
                        {"Make_ID": 9, "Make_Name": ""},
                    ]
                },
            )

        makes = run(lambda c: vpic.get_all_makes(c), handler)
        assert makes == [vpic.Make(id=474, name="HONDA"), vpic.Make(id=1684, name="LAND ROVER")]

    def test_models_deduplicated_case_insensitively(self):
        """First spelling wins; blanks are dropped."""
        seen_paths = []

        def handler(request):
            seen_paths.append(request.url.path)
            return httpx.Response(
                200,
                json={
                    "Results": [
                        {"Model_Name": "Civic"},
                        {"Model_Name": "CIVIC"},
                        {"Model_Name": " Accord  "},
                        {"Model_Name": ""},
                        {"Model_Name": "civic"},
                    ]
                },
            )

        models = run(lambda c: vpic.get_models_for_make_year(c, "Land Rover", 2020), handler)
        assert models == ["Civic", "Accord"]
        assert seen_paths == ["/api/vehicles/GetModelsForMakeYear/make/Land Rover/modelyear/2020"]


class TestCarQuery:
    """CarQuery trim parsing."""

    def test_parse_jsonp(self):
        """The JSONP wrapper is stripped."""
        assert carquery.parse_jsonp('?({"Trims": []});') == {"Trims": []}

    def test_trims_from_payload(self):
        """Trim fields are mapped, with engine cc as a fallback."""
        trims = carquery.trims_from_payload(
            {
                "Trims": [
                    {"model_trim": "EX", "model_engine_fuel": "Gasoline", "model_transmission_type": "Automatic"},
                    {"model_trim": "ex", "model_engine_fuel": "gasoline", "model_transmission_type": "automatic"},
                    {"model_trim": "Si", "model_engine_cc": "1996", "model_transmission_type": None},
                ]
            }
        )
        assert trims == [
            carquery.Trim(trim="EX", engine="Gasoline", transmission="Automatic"),
            carquery.Trim(trim="Si", engine="1996", transmission=""),
        ]

    def test_failure_yields_blank_trim(self):
        """Errors never propagate; the model still gets one blank trim."""

        def handler(request):
            return httpx.Response(500, text="oops")

        trims = run(lambda c: carquery.get_trims(c, "Honda", "Civic", 2020), handler)
        assert trims == [carquery.BLANK_TRIM]

    def test_get_trims(self):
        """A JSONP answer is decoded into trims."""

        def handler(request):
            assert request.url.params["cmd"] == "getTrims"
            assert request.url.params["model"] == "Civic"
            return httpx.Response(200, text='?({"Trims":[{"model_trim":"LX","model_engine_fuel":"Gasoline"}]});')

        trims = run(lambda c: carquery.get_trims(c, "Honda", "Civic", 2020), handler)
        assert trims == [carquery.Trim(trim="LX", engine="Gasoline", transmission="")]
