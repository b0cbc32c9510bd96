"""Behaviour tests for compiling a document export into content blocks.

These pytest-bdd scenarios run a styled, export-shaped document through
``DocBlocksBuilder.build`` and check the resulting block list: HTML and
shortcode blocks alternate in document order, the Scrolly body becomes a list
of validated steps, and the ImageEmbed body supplies the image source.

Usage
-----
Run ``pytest tests/bdd/test_compile_document.py -v`` after installing the test
extra (``pip install -e .[test]``). No network access is required.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, scenarios, then, when

from doc_blocks.builder import BuildResult, DocBlocksBuilder
from doc_blocks.shortcodes import HtmlBlock, ScrollyStep, ShortcodeBlock

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "compile_document.feature"
)
scenarios(FEATURE_FILE)

ScenarioState = dict[str, typ.Any]

STYLED_EXPORT = """
<html><head><style>.c1{font-weight:700}.c2{color:#000}</style></head><body>
<p class="c0"><span class="c1">Intro</span><span class="c2"> text</span></p>
<p><span>[[ImageEmbed size=wide]]</span></p>
<p><span><img src="https://img.example/a.png" alt="Harbour"></span></p>
<p><span>[[/ImageEmbed]]</span></p>
<p><span>[[Scrolly]]</span></p>
<p><span>[{&ldquo;img&rdquo;:&ldquo;one.png&rdquo;,&ldquo;text&rdquo;:&ldquo;First&rdquo;},</span></p>
<p><span>{&ldquo;img&rdquo;:&ldquo;&rdquo;,&ldquo;text&rdquo;:&ldquo;Skipped&rdquo;}]</span></p>
<p><span>[[/Scrolly]]</span></p>
<p><span>Outro</span></p>
</body></html>
"""


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a document export with a scrolly narrative and an image embed")
def given_export(scenario_state: ScenarioState) -> None:
    """Store the styled export used by the scenario."""
    scenario_state["export"] = STYLED_EXPORT


@when("I compile the export")
def when_compile(scenario_state: ScenarioState) -> None:
    """Run the pure build pipeline on the stored export."""
    scenario_state["result"] = DocBlocksBuilder.build(scenario_state["export"])


def _result(scenario_state: ScenarioState) -> BuildResult:
    return typ.cast("BuildResult", scenario_state["result"])


@then("the blocks alternate between HTML and shortcodes in document order")
def then_block_order(scenario_state: ScenarioState) -> None:
    """Verify block kinds and shortcode names follow the document."""
    blocks = _result(scenario_state).blocks
    kinds = [type(block).__name__ for block in blocks]
    assert kinds == [
        "HtmlBlock",
        "ShortcodeBlock",
        "HtmlBlock",
        "ShortcodeBlock",
        "HtmlBlock",
    ], f"unexpected block sequence {kinds}"
    names = [block.name for block in blocks if isinstance(block, ShortcodeBlock)]
    assert names == ["ImageEmbed", "Scrolly"]
    intro = typ.cast("HtmlBlock", blocks[0])
    soup = BeautifulSoup(intro.html, "html.parser")
    assert soup.find("strong").get_text() == "Intro", "expected bold intro text"


@then("the scrolly block lists its valid steps")
def then_scrolly_steps(scenario_state: ScenarioState) -> None:
    """Verify the Scrolly body was compiled into validated steps."""
    scrolly = typ.cast("ShortcodeBlock", _result(scenario_state).blocks[3])
    assert scrolly.attrs == {
        "steps": [ScrollyStep(img="one.png", pos="center", text="First")]
    }
    assert scrolly.body_html is None


@then("the image embed takes its source from the pasted image")
def then_image_embed(scenario_state: ScenarioState) -> None:
    """Verify the ImageEmbed attributes were filled from its body."""
    embed = typ.cast("ShortcodeBlock", _result(scenario_state).blocks[1])
    assert embed.attrs == {
        "size": "wide",
        "src": "https://img.example/a.png",
        "alt": "Harbour",
    }
    assert embed.body_html is None
