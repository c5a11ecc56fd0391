"""A short scripted session against ``HtmlDriver``.

Used by ``listenable demo`` to show which events a typical session fires.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from listenable.common.exceptions import NoSuchElementException
from listenable.common.roles import By, Dimension, OutputType
from listenable.config import InterceptionSettings
from listenable.demo.html_driver import HtmlDriver
from listenable.events.api import Listener
from listenable.events.factory import create_intercepted_root

BASE_URL = "https://shop.example.test/"

DEMO_PAGES = {
    BASE_URL: """
    <html>
    <head><title>Bug Shop</title></head>
    <body>
        <h1>Bug Shop</h1>
        <ul id="products">
            <li class="product">Ladybird</li>
            <li class="product">Stag beetle</li>
            <li class="product">Firefly</li>
        </ul>
        <form id="search" action="/results">
            <input type="text" name="q" />
            <button type="submit">Search</button>
        </form>
        <a href="/about">About us</a>
    </body>
    </html>
    """,
    BASE_URL + "results": """
    <html>
    <head><title>Results</title></head>
    <body><p class="hit">Firefly</p></body>
    </html>
    """,
    BASE_URL + "about": """
    <html>
    <head><title>About</title></head>
    <body><p>Family business since 1887.</p></body>
    </html>
    """,
}


def run_demo(
    listeners: Iterable[Listener],
    settings: InterceptionSettings | None = None,
) -> Any:
    """Drive the demo shop through a proxy carrying *listeners*.

    Returns:
        The intercepted driver, left on the last page visited.
    """
    driver = create_intercepted_root(
        HtmlDriver(DEMO_PAGES), listeners, settings=settings
    )
    driver.get(BASE_URL)
    products = driver.find_elements(By.class_name("product"))
    for product in products:
        product.get_text()

    search = driver.find_element(By.id("search"))
    query = search.find_element(By.name("q"))
    query.send_keys("fire", "fly")
    search.find_element(By.tag_name("button")).click()

    driver.navigate().back()
    driver.find_element(By.link_text("About us")).click()
    driver.navigate().refresh()

    driver.execute_script("alert('Thanks for visiting')")
    driver.switch_to().alert().accept()
    driver.manage().window().set_size(Dimension(800, 600))
    driver.get_screenshot_as(OutputType.BASE64)

    try:
        driver.find_element(By.id("basket"))
    except NoSuchElementException:
        pass
    return driver
