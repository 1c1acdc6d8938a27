"""Interactive session package — 3-layer architecture (runner / controller / view).

``runner``, ``state``, ``tasks``, ``wizards`` and ``controller`` have no
Textual imports; only ``app`` and ``widgets`` render.
"""
