"""Wizard form widget — renders whichever wizard is active.

File: src/mvn_tui/ui/tui/widgets/wizard.py
"""

from __future__ import annotations

from rich.style import Style
from rich.text import Text
from textual.widgets import Static

from mvn_tui.ui.tui.state import SessionState
from mvn_tui.ui.tui.wizards import (
    DependencyWizard,
    FieldWizard,
    ModuleWizard,
    ProjectWizard,
    TextField,
)

NO_POM_WARNING = "⚠ No pom.xml found in the current directory or parent directories."

_S_TITLE = Style(color="#3fa9f5", bold=True)
_S_LABEL = Style(color="#c8cdd8")
_S_FOCUSED = Style(color="#72c7ff", bold=True)
_S_VALUE = Style(color="#c8cdd8")
_S_PLACEHOLDER = Style(color="#4a5670", italic=True)
_S_HINT = Style(color="#7f8aa3")
_S_ERROR = Style(color="#e05555")
_S_WARNING = Style(color="#e0b455", bold=True)
_S_CURSOR = Style(color="#05070c", bgcolor="#72c7ff", bold=True)

_PLAIN = Style()


class _Palette:
    __slots__ = (
        "cursor",
        "error",
        "focused",
        "hint",
        "label",
        "placeholder",
        "title",
        "value",
        "warning",
    )

    def __init__(self, no_color: bool) -> None:
        self.title = _PLAIN if no_color else _S_TITLE
        self.label = _PLAIN if no_color else _S_LABEL
        self.focused = Style(bold=True) if no_color else _S_FOCUSED
        self.value = _PLAIN if no_color else _S_VALUE
        self.placeholder = _PLAIN if no_color else _S_PLACEHOLDER
        self.hint = _PLAIN if no_color else _S_HINT
        self.error = _PLAIN if no_color else _S_ERROR
        self.warning = _PLAIN if no_color else _S_WARNING
        self.cursor = Style(reverse=True) if no_color else _S_CURSOR


def render_wizard(state: SessionState) -> Text:
    palette = _Palette(state.no_color)
    wizard = state.wizard
    if isinstance(wizard, ProjectWizard):
        return _render_project(wizard, palette, no_project=state.started_without_project)
    if isinstance(wizard, ModuleWizard):
        return _render_module(wizard, palette)
    if isinstance(wizard, DependencyWizard):
        return _render_dependency(wizard, palette)
    return Text()


def _render_project(wizard: ProjectWizard, palette: _Palette, *, no_project: bool) -> Text:
    text = Text()
    if no_project:
        text.append(f"{NO_POM_WARNING}\n\n", style=palette.warning)
    text.append("Create New Maven Project\n\n", style=palette.title)

    archetype = wizard.archetype
    text.append("Project Type: ", style=palette.label)
    text.append(f"◀ {archetype.name} ▶", style=palette.focused)
    text.append(f"  {archetype.description}\n\n", style=palette.hint)

    _render_fields(text, wizard, palette)

    marker = "▶ " if wizard.java_selector_focused else "  "
    label_style = palette.focused if wizard.java_selector_focused else palette.label
    text.append(f"{marker}Java Version: ", style=label_style)
    selected = wizard.java_version
    if selected is None:
        text.append("(not detected)\n", style=palette.hint)
    else:
        text.append(f"◀ {selected.display} ▶\n", style=palette.value)

    _render_errors(text, wizard, palette)
    return text


def _render_module(wizard: ModuleWizard, palette: _Palette) -> Text:
    text = Text("Create New Module\n\n", style=palette.title)
    _render_fields(text, wizard, palette)
    _render_errors(text, wizard, palette)
    return text


def _render_dependency(wizard: DependencyWizard, palette: _Palette) -> Text:
    if wizard.custom_mode:
        text = Text("Add Custom Dependency\n\n", style=palette.title)
        _render_fields(text, wizard, palette)
        return text

    text = Text("Add Dependency\n\n", style=palette.title)
    for index, choice in enumerate(wizard.choices):
        style = palette.cursor if index == wizard.cursor else palette.label
        text.append(f"{choice.name}", style=style)
        text.append(f"  {choice.description}\n", style=palette.hint)
    return text


def _render_fields(text: Text, wizard: FieldWizard, palette: _Palette) -> None:
    for index, field in enumerate(wizard.fields):
        _render_field(text, field, palette, focused=index == wizard.focus)


def _render_field(text: Text, field: TextField, palette: _Palette, *, focused: bool) -> None:
    marker = "▶ " if focused else "  "
    text.append(f"{marker}{field.label}: ", style=palette.focused if focused else palette.label)
    if field.value:
        text.append(field.value, style=palette.value)
    else:
        text.append(field.placeholder, style=palette.placeholder)
    if focused:
        text.append("█", style=palette.focused)
    text.append("\n")
    if field.hint:
        text.append(f"    {field.hint}\n", style=palette.hint)


def _render_errors(text: Text, wizard: FieldWizard, palette: _Palette) -> None:
    errors = wizard.visible_errors
    if not errors:
        return
    text.append("\n")
    for message in errors:
        text.append(f"✗ {message}\n", style=palette.error)


class WizardView(Static):
    """Form for the active project, module, or dependency wizard."""

    DEFAULT_CSS = """
    WizardView {
        height: 1fr;
        padding: 1 2;
        overflow-y: auto;
    }
    """

    def update_from_state(self, state: SessionState) -> None:
        self.update(render_wizard(state))


__all__ = ["NO_POM_WARNING", "WizardView", "render_wizard"]
