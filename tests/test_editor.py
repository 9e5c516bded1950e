# tests/test_editor.py
import pytest

from conftest import product
from sdk.editor import (
    CATALOG, NAME_REQUIRED, PRICE_INVALID, QUANTITY_INVALID,
    FormState, RecordEditor, validate_form,
)
from sdk.errors import (
    FETCH_ONE_ERROR, NOT_FOUND, SAVE_ERROR, SAVE_FAILED,
    ApiError, ConnectivityError, EditorModeError,
)
from sdk.models import ApiResponse, ProductPayload


def _filled(editor, **fields):
    for name, value in fields.items():
        editor.set_field(name, value)
    return editor


# ---------------------------
# validate_form
# ---------------------------
def test_missing_name_only():
    errors = validate_form(FormState(name="", price="5", quantity="3"))
    assert errors == {"name": NAME_REQUIRED}


def test_price_and_quantity_errors_together():
    errors = validate_form(FormState(name="Widget", price="0", quantity="-1"))
    assert errors == {"price": PRICE_INVALID, "quantity": QUANTITY_INVALID}


def test_all_fields_checked():
    errors = validate_form(FormState())
    assert set(errors) == {"name", "price", "quantity"}


@pytest.mark.parametrize("price", ["", "abc", "-3", "0.0", "nan", "inf"])
def test_bad_prices(price):
    assert "price" in validate_form(FormState(name="x", price=price, quantity="1"))


@pytest.mark.parametrize("quantity", ["", "many", "1.5", "-1"])
def test_bad_quantities(quantity):
    assert "quantity" in validate_form(FormState(name="x", price="1", quantity=quantity))


@pytest.mark.parametrize("price, quantity", [("1_5", "1_0"), ("1e3", "1e1"), ("0x10", "0x10")])
def test_python_literal_syntax_is_not_a_number(price, quantity):
    assert set(validate_form(FormState(name="x", price=price, quantity=quantity))) == {"price", "quantity"}


def test_plain_decimals_accepted():
    assert validate_form(FormState(name="x", price=".5", quantity="+3")) == {}
    assert validate_form(FormState(name="x", price="12.", quantity="007")) == {}


def test_whitespace_name_is_missing():
    assert validate_form(FormState(name="   ", price="1", quantity="0")) == {"name": NAME_REQUIRED}


def test_zero_quantity_and_blank_optionals_are_fine():
    assert validate_form(FormState(name="x", price=" 0.01 ", quantity="0")) == {}


def test_validate_is_idempotent(fake_client):
    editor = _filled(RecordEditor(fake_client), name="", price="abc", quantity="2")
    assert editor.validate() is False
    first = dict(editor.validation_errors)
    assert editor.validate() is False
    assert editor.validation_errors == first


def test_validate_drops_errors_that_no_longer_apply(fake_client):
    editor = RecordEditor(fake_client)
    editor.validate()
    editor.form.name = "Widget"  # not through set_field
    editor.validate()
    assert "name" not in editor.validation_errors


# ---------------------------
# modes and load
# ---------------------------
def test_mode_is_fixed_by_identifier(fake_client):
    assert RecordEditor(fake_client).is_editing is False
    assert RecordEditor(fake_client, "").is_editing is False
    assert RecordEditor(fake_client, 7).is_editing is True
    assert RecordEditor(fake_client).submit_label == "Add Product"
    assert RecordEditor(fake_client, 7).submit_label == "Update Product"


def test_load_in_create_mode_is_an_error(fake_client):
    with pytest.raises(EditorModeError):
        RecordEditor(fake_client).load()


def test_load_populates_form_as_text(fake_client):
    fake_client.will("get_product", ApiResponse(success=True, data=product(7, "Widget", None, "Tools", 10.0, 3)))
    editor = RecordEditor(fake_client, 7)
    assert editor.load()
    assert editor.form == FormState(name="Widget", description="", price="10", quantity="3", category="Tools")
    assert fake_client.calls == [("get_product", 7)]
    assert editor.loading is False


def test_load_missing_numbers_become_empty_text(fake_client):
    data = product(7, "Widget", "d", None, price=9.99)
    data["quantity"] = None
    fake_client.will("get_product", ApiResponse(success=True, data=data))
    editor = RecordEditor(fake_client, 7)
    editor.load()
    assert editor.form.price == "9.99"
    assert editor.form.quantity == ""


@pytest.mark.parametrize("result, message", [
    (ApiResponse(success=False), NOT_FOUND),
    (ApiError(404, {"success": False, "message": "Product not found with id: 7"}), NOT_FOUND),
    (ApiError(500, {"success": False}), FETCH_ONE_ERROR),
    (ConnectivityError("refused"), FETCH_ONE_ERROR),
])
def test_load_failures_keep_defaults(fake_client, result, message):
    fake_client.will("get_product", result)
    editor = RecordEditor(fake_client, 7)
    assert editor.load() is False
    assert editor.error == message
    assert editor.form == FormState()
    assert editor.loading is False


# ---------------------------
# set_field
# ---------------------------
def test_set_field_clears_only_that_error(fake_client):
    editor = RecordEditor(fake_client)
    editor.validate()
    editor.set_field("price", "3")
    assert set(editor.validation_errors) == {"name", "quantity"}


def test_set_field_rejects_unknown_names(fake_client):
    with pytest.raises(KeyError):
        RecordEditor(fake_client).set_field("sku", "A1")


# ---------------------------
# submit
# ---------------------------
def test_invalid_form_makes_no_request(fake_client):
    editor = _filled(RecordEditor(fake_client), name="Widget", price="0", quantity="1")
    assert editor.submit() is False
    assert fake_client.calls == []
    assert editor.validation_errors == {"price": PRICE_INVALID}
    assert editor.navigate_to is None


def test_create_payload(fake_client):
    fake_client.will("create_product", ApiResponse(success=True, data=product(1, "Widget", "", "Tools", 9.99, 10)))
    editor = _filled(RecordEditor(fake_client), name="Widget", price="9.99", quantity="10",
                     category="Tools", description="")
    assert editor.validate()
    assert editor.submit()

    method, payload = fake_client.calls[0]
    assert method == "create_product"
    assert payload.model_dump() == {
        "name": "Widget", "description": "", "price": 9.99, "quantity": 10, "category": "Tools",
    }
    assert editor.navigate_to == CATALOG
    assert editor.saved.id == 1


def test_payload_is_trimmed(fake_client):
    editor = _filled(RecordEditor(fake_client), name="  Widget ", description=" nice ",
                     price=" 2.5", quantity="4 ", category=" Tools ")
    assert editor.build_payload() == ProductPayload(
        name="Widget", description="nice", price=2.5, quantity=4, category="Tools")


def test_update_uses_id(fake_client):
    editor = _filled(RecordEditor(fake_client, 7), name="Widget", price="1", quantity="1")
    assert editor.submit()
    method, pid, payload = fake_client.calls[0]
    assert (method, pid) == ("update_product", 7)
    assert payload.name == "Widget"


def test_server_field_errors_replace_client_errors(fake_client):
    fake_client.will("create_product", ApiError(400, {
        "success": False, "message": "Validation failed",
        "errors": {"name": "Product name must not exceed 100 characters", "category": "too long"},
    }))
    editor = _filled(RecordEditor(fake_client), name="Widget", price="1", quantity="1")
    assert editor.submit() is False
    assert editor.validation_errors == {
        "name": "Product name must not exceed 100 characters", "category": "too long",
    }
    assert editor.error is None
    assert editor.navigate_to is None

    editor.set_field("name", "Short")
    assert editor.validation_errors == {"category": "too long"}


def test_field_errors_in_unsuccessful_2xx_reply(fake_client):
    fake_client.will("create_product", ApiResponse(
        success=False, message="Validation failed", errors={"name": "taken"}))
    editor = _filled(RecordEditor(fake_client), name="Widget", price="1", quantity="1")
    assert editor.submit() is False
    assert editor.validation_errors == {"name": "taken"}
    assert editor.error is None
    assert editor.navigate_to is None


def test_server_message_becomes_page_error(fake_client):
    fake_client.will("create_product", ApiError(400, {
        "success": False, "message": "Product with name 'Widget' already exists"}))
    editor = _filled(RecordEditor(fake_client), name="Widget", price="1", quantity="1")
    editor.submit()
    assert editor.error == "Product with name 'Widget' already exists"
    assert editor.validation_errors == {}


@pytest.mark.parametrize("result, message", [
    (ApiResponse(success=False, message="Disk full"), "Disk full"),
    (ApiResponse(success=False), SAVE_FAILED),
    (ApiError(500, {}), SAVE_ERROR),
    (ConnectivityError("refused"), SAVE_ERROR),
])
def test_generic_save_failures(fake_client, result, message):
    fake_client.will("create_product", result)
    editor = _filled(RecordEditor(fake_client), name="Widget", price="1", quantity="1")
    assert editor.submit() is False
    assert editor.error == message
    assert editor.loading is False
    assert editor.navigate_to is None


def test_submit_disabled_while_loading(fake_client):
    editor = _filled(RecordEditor(fake_client), name="Widget", price="1", quantity="1")
    labels = []

    def create_product(payload):
        labels.append((editor.submit_label, editor.can_submit))
        assert editor.submit() is False
        return ApiResponse(success=True)

    fake_client.create_product = create_product
    assert editor.submit()
    assert labels == [("Saving...", False)]
    assert editor.can_submit


def test_cancel_navigates_without_request(fake_client):
    editor = RecordEditor(fake_client)
    editor.cancel()
    assert editor.navigate_to == CATALOG
    assert fake_client.calls == []
