# test_admin_session.py
from storefront.core.config import get_settings
from storefront.schemas import OrderStatus
from storefront.services.admin import AdminSession
from tests.conftest import run


def _admin(api):
    admin = AdminSession(api=api)
    assert admin.requires_login
    assert run(admin.login("admin", "admin")).success
    assert not admin.requires_login
    run(admin.load_products())
    return admin


def _order(api, name):
    return run(api.create_order({
        "items": [{"name": "Lemonade", "quantity": 1, "price": 1500}],
        "customer": {"name": name, "deliveryType": "pickup"},
        "total": 1500,
    })).data


def test_admin_sees_whole_catalog(api):
    admin = _admin(api)
    names = [p.name for p in admin.products]
    assert len(names) == 6
    assert "Caesar Salad" in names


def test_bad_login(api):
    admin = AdminSession(api=api)
    result = run(admin.login("admin", "nope"))
    assert not result.success
    assert admin.requires_login
    assert admin.last_error == "Invalid username or password"


def test_search_and_pagination(api, monkeypatch):
    monkeypatch.setenv("ADMIN_PAGE_SIZE", "4")
    get_settings.cache_clear()
    admin = _admin(api)

    assert admin.page_count == 2
    admin.set_page(2)
    assert len(admin.page_products) == 2

    admin.set_page(9)
    assert admin.page == 1

    admin.set_page(2)
    admin.search("pizza")
    assert admin.page == 1
    assert [p.name for p in admin.page_products] == ["Muzzarella Pizza"]

    admin.search("1500")
    assert [p.name for p in admin.filtered_products] == ["Lemonade"]


def test_page_resets_when_items_disappear(api, monkeypatch):
    monkeypatch.setenv("ADMIN_PAGE_SIZE", "5")
    get_settings.cache_clear()
    admin = _admin(api)
    admin.set_page(2)

    last = admin.page_products[0]
    assert run(admin.delete_product(last.id)).success

    assert admin.page == 1
    assert admin.page_count == 1


def test_new_product_form_validation(api):
    admin = _admin(api)
    form = admin.new_product()

    assert form.category.value == "hamburgers"
    form.price = "abc"
    result = run(admin.save(form))

    assert not result.success
    assert result.issues == ["Name is required", "Price must be a number"]


def test_option_issues_block_saving(api):
    admin = _admin(api)
    form = admin.new_product("pizzas")
    form.name, form.price = "Fugazzeta", 9000
    form.editor.set_enabled("portion", True)
    form.editor.group("portion").choices[0].is_default = False

    result = run(admin.save(form))

    assert not result.success
    assert result.issues == ["Portion (Whole/Half): This option requires one choice marked as default"]


def test_create_then_edit_product(api):
    admin = _admin(api)
    form = admin.new_product("pizzas")
    form.name, form.price = "  Fugazzeta ", "9000"
    form.editor.set_enabled("portion", True)
    form.editor.set_price_modifier("portion", 1, 4000)
    form.editor.set_subtracts("portion", 1, True)
    form.editor.set_enabled("beverage", True)
    form.editor.add_choice("beverage")
    form.editor.set_choice_name("beverage", 0, "Cola")
    form.editor.set_price_modifier("beverage", 0, 1200)

    result = run(admin.save(form))

    assert result.success
    product = result.product
    assert product.name == "Fugazzeta"
    assert product.price == 9000
    assert product.options["portion"]["choices"][1]["priceModifier"] == -4000
    assert [c["name"] for c in product.options["beverage"]["choices"]] == ["None", "Cola"]
    assert product in admin.products

    edit = admin.edit_product(product)
    assert not edit.is_new
    assert [c.name for c in edit.editor.group("beverage").choices] == ["Cola"]

    edit.change_category("empanadas")
    edit.editor.set_enabled("quantity", True)
    saved = run(admin.save(edit))

    assert saved.success
    assert saved.product.id == product.id
    assert saved.product.category.value == "empanadas"
    assert list(saved.product.options) == ["quantity", "beverage"]


def test_publish_and_stock_toggles(api):
    admin = _admin(api)
    salad = next(p for p in admin.products if p.name == "Caesar Salad")

    assert run(admin.toggle_published(salad)).success
    salad = next(p for p in admin.products if p.name == "Caesar Salad")
    assert salad.published is True

    assert run(admin.set_out_of_stock(salad, True)).success
    salad = next(p for p in admin.products if p.name == "Caesar Salad")
    assert salad.out_of_stock is True


def test_orders(api):
    admin = _admin(api)
    _order(api, "Ana")
    _order(api, "Juan")

    run(admin.load_orders())
    assert [o.id for o in admin.orders] == ["ORD-0002", "ORD-0001"]

    # Any status may follow any other
    assert run(admin.update_order_status("ORD-0001", "delivered")).success
    assert run(admin.update_order_status("ORD-0001", OrderStatus.PENDING)).success
    assert run(admin.update_order_status("ORD-0002", "ready")).success

    run(admin.load_orders(status="ready"))
    assert [o.id for o in admin.orders] == ["ORD-0002"]
    assert admin.orders[0].status.label == "Ready"


def test_expired_session_requires_login(api):
    admin = _admin(api)
    api.revoke_tokens()
    form = admin.new_product("pizzas")
    form.name, form.price = "Fugazzeta", 9000

    result = run(admin.save(form))

    assert not result.success
    assert result.unauthenticated
    assert admin.requires_login
    assert not run(admin.load_orders()).success


def test_logout(api):
    admin = _admin(api)
    admin.logout()
    assert admin.requires_login
    assert admin.products == []


def test_search_matches_large_whole_prices(api):
    admin = _admin(api)
    form = admin.new_product("appetizers")
    form.name, form.price = "Party Platter", 1234567
    assert run(admin.save(form)).success

    admin.search("1234567")
    assert [p.name for p in admin.filtered_products] == ["Party Platter"]

    form = admin.new_product("appetizers")
    form.name, form.price = "Tapas", 99.5
    assert run(admin.save(form)).success

    admin.search("99.5")
    assert [p.name for p in admin.filtered_products] == ["Tapas"]
