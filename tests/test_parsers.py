"""
Tests for the Nemlig response parsers
"""

import json

import pytest

from nemlig_mcp.client import parsers
from nemlig_mcp.errors import ParseError
from nemlig_mcp.models import OrderStatus
from nemlig_mcp.result import Failure, Success


def assert_parse_error(result, field=None):
    assert isinstance(result, Failure)
    assert isinstance(result.error, ParseError)
    if field is not None:
        assert result.error.field == field


class TestParseCart:
    """Tests for the shared basket parser"""

    def test_basket_example(self, basket_payload):
        result = parsers.parse_cart(json.dumps(basket_payload))

        assert isinstance(result, Success)
        cart = result.value
        assert len(cart.items) == 1
        assert cart.items[0].product_id == "1"
        assert cart.items[0].product_name == "Milk"
        assert cart.items[0].quantity == 2
        assert cart.items[0].price_per_unit == 10.0
        assert cart.items[0].total_price == 20.0
        assert cart.total_price == 20.0
        assert cart.item_count == 1

    def test_upstream_line_total_wins_over_derived_total(self):
        body = json.dumps({
            "Lines": [{"Id": "7", "Name": "Æbler", "Quantity": 3, "Price": 4.0, "TotalPrice": 10.0}],
        })
        cart = parsers.parse_cart(body).value

        assert cart.items[0].total_price == 10.0
        # no basket total reported: derived from the lines
        assert cart.total_price == 10.0
        assert cart.item_count == 1

    def test_empty_basket(self):
        cart = parsers.parse_cart(json.dumps({"TotalPrice": 0})).value

        assert cart.items == []
        assert cart.total_price == 0.0
        assert cart.item_count == 0

    def test_line_without_id_is_a_parse_error(self):
        body = json.dumps({"Lines": [{"Name": "Milk", "Quantity": 1, "Price": 10.0}]})

        assert_parse_error(parsers.parse_cart(body), "Lines[0].Id")

    def test_negative_quantity_is_a_parse_error(self):
        body = json.dumps({"Lines": [{"Id": "1", "Quantity": -1, "Price": 10.0}]})

        assert_parse_error(parsers.parse_cart(body), "Lines[0].Quantity")

    @pytest.mark.parametrize("body", ["", "not json", "[1, 2]"])
    def test_malformed_body_is_a_parse_error(self, body):
        assert_parse_error(parsers.parse_cart(body), "<body>")

    def test_deeply_nested_body_is_a_parse_error(self):
        body = "[" * 100000 + "]" * 100000

        assert_parse_error(parsers.parse_cart(body), "<body>")

    def test_out_of_range_numbers_fall_back_to_defaults(self):
        body = (
            '{"Lines": [{"Id": "1", "Quantity": 1e400, "Price": ' + "9" * 400 + '}],'
            ' "TotalPrice": 1e400}'
        )
        cart = parsers.parse_cart(body).value

        assert cart.items[0].quantity == 0
        assert cart.items[0].price_per_unit == 0.0
        assert cart.items[0].total_price == 0.0
        assert cart.total_price == 0.0


class TestParseSearch:
    """Tests for the search parser"""

    def test_products_keep_upstream_order(self, search_payload):
        result = parsers.parse_search(json.dumps(search_payload), "mælk", limit=2, page=1)

        assert isinstance(result, Success)
        found = result.value
        assert [p.id for p in found.products] == ["5039929", "5039930"]
        assert found.query == "mælk"
        assert found.total_results == 57
        assert found.page == 1
        assert found.page_size == 2

    def test_product_fields(self, search_payload):
        found = parsers.parse_search(json.dumps(search_payload), "mælk").value
        first, second = found.products

        assert first.name == "Letmælk 1,5%"
        assert first.price == 11.95
        assert first.unit == "11,95 kr./l"
        assert first.brand == "Arla"
        assert first.category == "Mejeri"
        assert first.image_url == "https://live.nemligstatic.com/letmaelk.png"
        assert first.in_stock is True
        assert second.in_stock is False
        assert second.brand is None

    def test_missing_products_object_means_no_results(self):
        found = parsers.parse_search(json.dumps({"Recipes": []}), "xyz").value

        assert found.products == []
        assert found.total_results == 0

    def test_product_without_id_is_a_parse_error(self):
        body = json.dumps({"Products": {"Products": [{"Id": "", "Name": "Ghost"}]}})

        assert_parse_error(parsers.parse_search(body, "ghost"), "Products[0].Id")


class TestParseProduct:
    """Tests for single product decoding"""

    def test_defaults_for_missing_optional_fields(self):
        product = parsers.parse_product({"Id": 103368}).value

        assert product.id == "103368"
        assert product.name == ""
        assert product.price == 0.0
        assert product.in_stock is True
        assert product.nutritional_info is None

    def test_nutrition(self):
        product = parsers.parse_product({
            "Id": "1",
            "NutritionalInfo": {"EnergyKcal": 46, "Fat": "1,5", "Protein": 3.5, "Sugar": None},
        }).value

        assert product.nutritional_info.energy_kcal == 46.0
        assert product.nutritional_info.fat == 1.5
        assert product.nutritional_info.protein == 3.5
        assert product.nutritional_info.sugar is None

    def test_missing_id(self):
        assert_parse_error(parsers.parse_product({"Name": "No id"}), "Id")


class TestOrderStatus:
    """Tests for OrderStatus decoding"""

    def test_known_code(self):
        assert OrderStatus.from_code(3) is OrderStatus.DELIVERED

    @pytest.mark.parametrize("code", [99, -1, None, "abc", True, float("inf"), float("nan")])
    def test_unknown_code_defaults_to_pending(self, code):
        assert OrderStatus.from_code(code) is OrderStatus.PENDING


class TestParseOrders:
    """Tests for the order history parser"""

    def test_orders(self):
        body = json.dumps({
            "Orders": [
                {
                    "Id": 9001,
                    "OrderNumber": "12345678",
                    "OrderDate": "2024-03-01T10:00:00",
                    "Status": 3,
                    "Total": 512.5,
                    "SubTotal": 480.0,
                    "DeliveryAddress": "Testvej 1, 2100 København Ø",
                    "DeliveryTime": {"Start": "2024-03-02T17:00:00", "End": "2024-03-02T19:00:00"},
                    "IsEditable": False,
                    "IsCancellable": True,
                },
                {"Id": "9002", "Status": 42},
            ]
        })
        orders = parsers.parse_orders(body).value

        assert len(orders) == 2
        first, second = orders
        assert first.id == "9001"
        assert first.order_number == "12345678"
        assert first.status is OrderStatus.DELIVERED
        assert first.total_price == 512.5
        assert first.sub_total == 480.0
        assert first.delivery_time == "2024-03-02T17:00:00 - 2024-03-02T19:00:00"
        assert first.is_cancellable is True
        assert second.status is OrderStatus.PENDING
        assert second.delivery_time is None
        assert second.total_price == 0.0

    def test_out_of_range_status_decodes_to_pending(self):
        body = '{"Orders": [{"Id": "1", "Status": 1e400}, {"Id": "2", "Status": true}]}'
        orders = parsers.parse_orders(body).value

        assert [order.status for order in orders] == [OrderStatus.PENDING, OrderStatus.PENDING]

    def test_missing_orders_list_means_no_orders(self):
        assert parsers.parse_orders(json.dumps({})).value == []

    def test_order_without_id(self):
        body = json.dumps({"Orders": [{"OrderNumber": "1"}]})

        assert_parse_error(parsers.parse_orders(body), "Orders[0].Id")


class TestParseOrderDetail:
    """Tests for the order detail parser"""

    def test_order_detail(self):
        body = json.dumps({
            "Id": "9001",
            "OrderNumber": "12345678",
            "OrderDate": "2024-03-01",
            "Total": 120.0,
            "SubTotal": 100.0,
            "ShippingPrice": 29.0,
            "PackagingPrice": 5.0,
            "DepositPrice": 3.0,
            "CouponDiscount": -10.0,
            "TotalProductDiscount": 4.0,
            "NumberOfProducts": 3,
            "Lines": [
                {
                    "ProductNumber": "5039929",
                    "ProductName": "Letmælk",
                    "GroupName": "Mejeri",
                    "Quantity": 2,
                    "ItemPrice": 11.95,
                    "Amount": 23.9,
                    "DiscountAmount": 4.0,
                    "IsProductLine": True,
                    "CampaignName": "2 for 20",
                },
                {"ProductNumber": "PANT", "ProductName": "Pant", "Quantity": 3, "Amount": 3.0,
                 "IsProductLine": False},
            ],
            "CouponLines": [{"Type": "Discount", "Name": "Velkomst", "CouponNumber": "C-1"}],
        })
        detail = parsers.parse_order_detail(body, "9001").value

        assert detail.id == "9001"
        assert detail.shipping_price == 29.0
        assert detail.packaging_price == 5.0
        assert detail.deposit_price == 3.0
        assert detail.coupon_discount == -10.0
        assert detail.total_product_discount == 4.0
        assert [line.product_number for line in detail.lines] == ["5039929", "PANT"]
        assert detail.lines[0].campaign_name == "2 for 20"
        assert detail.lines[0].discount_amount == 4.0
        assert detail.lines[1].is_product_line is False
        assert detail.coupon_lines[0].coupon_number == "C-1"

    def test_zero_lines_is_a_parse_error(self):
        body = json.dumps({"Id": "9001", "OrderNumber": "1", "Lines": []})

        assert_parse_error(parsers.parse_order_detail(body, "9001"), "Lines")

    def test_missing_lines_is_a_parse_error(self):
        assert_parse_error(parsers.parse_order_detail(json.dumps({"Id": "9001"}), "9001"), "Lines")

    def test_requested_id_used_when_body_has_none(self):
        body = json.dumps({"Order": {"Lines": [{"ProductNumber": "1", "Quantity": 1}]}})

        assert parsers.parse_order_detail(body, "777").value.id == "777"


class TestParseDeliverySlots:
    """Tests for the delivery slot parser"""

    def test_slots(self):
        body = json.dumps([
            {"Id": "s1", "Date": "2024-03-02", "StartTime": "17:00", "EndTime": "19:00",
             "IsAvailable": False, "DeliveryPrice": 29},
        ])
        slot = parsers.parse_delivery_slots(body).value[0]

        assert slot.id == "s1"
        assert slot.time_from == "17:00"
        assert slot.time_to == "19:00"
        assert slot.available is False
        assert slot.price == 29.0

    def test_slot_without_id(self):
        assert_parse_error(parsers.parse_delivery_slots(json.dumps({"Slots": [{}]})), "Slots[0].Id")
