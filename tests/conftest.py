"""
Shared fixtures for the Nemlig MCP tests
"""

import json

import pytest

from nemlig_mcp.client.transport import HttpResponse
from nemlig_mcp.config import NemligConfig
from nemlig_mcp.result import Failure, Success


API_URL = "https://www.nemlig.com/webapi"


def json_response(payload, status_code=200, cookies=None):
    return HttpResponse(
        status_code=status_code,
        text=json.dumps(payload),
        headers={"Content-Type": "application/json"},
        cookies=cookies or {},
        url=API_URL,
    )


class FakeTransport:
    """Stands in for HttpTransport: records requests, replays canned responses"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    async def send(self, request):
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Failure):
            return response
        return Success(response)


@pytest.fixture
def config():
    return NemligConfig(
        api_url=API_URL,
        username="user@example.com",
        password="secret",
    )


@pytest.fixture
def basket_payload():
    return {
        "Lines": [{"Id": "1", "Name": "Milk", "Quantity": 2, "Price": 10.0}],
        "TotalPrice": 20.0,
        "NumberOfProducts": 1,
    }


@pytest.fixture
def search_payload():
    return {
        "Products": {
            "Products": [
                {
                    "Id": "5039929",
                    "Name": "Letmælk 1,5%",
                    "Price": 11.95,
                    "UnitPriceLabel": "11,95 kr./l",
                    "Brand": "Arla",
                    "Category": "Mejeri",
                    "PrimaryImage": "https://live.nemligstatic.com/letmaelk.png",
                    "Availability": {"IsAvailableInStock": True},
                },
                {
                    "Id": "5039930",
                    "Name": "Sødmælk",
                    "Price": 13.5,
                    "Availability": {"IsAvailableInStock": False},
                    "SomethingNew": {"Ignored": True},
                },
            ],
            "NumFound": 57,
        }
    }
