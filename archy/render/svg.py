"""SVG rendering for mindmap and network layouts, plus a pan/zoom HTML wrapper."""

from __future__ import annotations

import html
from string import Template

from ..layout.force import ForceConfig, ForceLayout, ViewportState
from ..layout.tree import NODE_RADIUS, RootedLayout, TreeNode

LINK_COLORS = {
    "leadsto": "#4baf7e",
    "dependson": "#5c8fd6",
    "parent": "#5c8fd6",
    "informedby": "#e6a117",
}
ROOT_COLOR = "#b5179e"
NODE_FILL = "#1b1f2a"
BG = "#0f1115"
TEXT_COLOR = "#e6e6e6"
EDGE_COLOR = "#3a4154"
ARROW_OFFSET = 8
NETWORK_MARGIN = 60


def esc(s: str) -> str:
    return html.escape(s, quote=True)


def _edge_path(src: TreeNode, dst: TreeNode) -> str:
    """Vertical bezier between circle rims (bottom->top going down, top->bottom going up)."""
    going_down = src.y < dst.y
    x1, x2 = src.x, dst.x
    y1 = src.y + NODE_RADIUS if going_down else src.y - NODE_RADIUS
    y2 = dst.y - NODE_RADIUS if going_down else dst.y + NODE_RADIUS
    mid_y = (y1 + y2) / 2
    return f"M {x1:.1f},{y1:.1f} C {x1:.1f},{mid_y:.1f} {x2:.1f},{mid_y:.1f} {x2:.1f},{y2:.1f}"


def _mindmap_edges(node: TreeNode, parts: list[str]) -> None:
    for child in node.children:
        color = LINK_COLORS.get(child.link_type, EDGE_COLOR)
        parts.append(
            f'<path class="edge edge-{child.link_type}" d="{_edge_path(node, child)}" '
            f'stroke="{color}" stroke-width="1.5" fill="none"/>'
        )
        _mindmap_edges(child, parts)


def _mindmap_node(node: TreeNode, parts: list[str]) -> None:
    is_root = node.link_type == "root"
    stroke = ROOT_COLOR if is_root else LINK_COLORS.get(node.link_type, EDGE_COLOR)
    fill = ROOT_COLOR if is_root else NODE_FILL
    parts.append(
        f'<g class="node node-{node.link_type}" transform="translate({node.x:.1f}, {node.y:.1f})">'
        f'<circle cx="0" cy="0" r="{NODE_RADIUS}" fill="{fill}" stroke="{stroke}" stroke-width="2"/>'
        f'<text x="0" y="{NODE_RADIUS + 14}" fill="{TEXT_COLOR}" font-family="Helvetica" '
        f'font-size="11" text-anchor="middle">{esc(node.name)}</text></g>'
    )


def render_mindmap_svg(layout: RootedLayout) -> str:
    """Render a placed rooted layout: ancestors above, descendants below."""
    width = layout.width
    height = layout.height
    offset_y = layout.offset_y

    parts: list[str] = []
    parts.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:.0f}" height="{height:.0f}" '
        f'viewBox="0 {offset_y:.0f} {width:.0f} {height:.0f}" style="background:{BG}">'
    )

    # Edges first (under nodes)
    parts.append('<g id="edges" stroke-linecap="round">')
    for ancestor in layout.ancestors:
        _mindmap_edges(ancestor, parts)
        color = LINK_COLORS.get(ancestor.link_type, EDGE_COLOR)
        parts.append(
            f'<path class="edge edge-{ancestor.link_type}" d="{_edge_path(ancestor, layout.root)}" '
            f'stroke="{color}" stroke-width="1.5" fill="none"/>'
        )
    _mindmap_edges(layout.root, parts)
    parts.append("</g>")

    parts.append('<g id="nodes">')
    for node in layout.walk():
        _mindmap_node(node, parts)
    parts.append("</g>")
    parts.append("</svg>")
    return "\n".join(parts) + "\n"


def render_network_svg(sim: ForceLayout, *, title: str) -> str:
    """Render the current positions of a force layout."""
    cfg: ForceConfig = sim.config
    nodes = list(sim.nodes.values())
    if nodes:
        min_x = min(n.x - n.r for n in nodes) - NETWORK_MARGIN
        max_x = max(n.x + n.r for n in nodes) + NETWORK_MARGIN
        min_y = min(n.y - n.r for n in nodes) - NETWORK_MARGIN
        max_y = max(n.y + n.r for n in nodes) + NETWORK_MARGIN
    else:
        min_x, max_x, min_y, max_y = -NETWORK_MARGIN, NETWORK_MARGIN, -NETWORK_MARGIN, NETWORK_MARGIN
    width = max_x - min_x
    height = max_y - min_y

    parts: list[str] = []
    parts.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:.0f}" height="{height:.0f}" '
        f'viewBox="{min_x:.0f} {min_y:.0f} {width:.0f} {height:.0f}" style="background:{BG}">'
    )
    parts.append(f"<title>{esc(title)}</title>")

    # One arrowhead per link type
    parts.append("<defs>")
    for kind in ("leadsto", "dependson", "informedby"):
        parts.append(
            f'<marker id="arrow-{kind}" markerWidth="8" markerHeight="6" refX="7" refY="3" orient="auto">'
            f'<polygon points="0 0, 8 3, 0 6" fill="{LINK_COLORS[kind]}"/></marker>'
        )
    parts.append("</defs>")

    parts.append('<g id="edges" stroke-linecap="round">')
    for edge in sim.edges:
        s = sim.nodes[edge.source]
        t = sim.nodes[edge.target]
        dx = t.x - s.x
        dy = t.y - s.y
        dist = (dx * dx + dy * dy) ** 0.5 or 1.0
        x1 = s.x + dx / dist * s.r
        y1 = s.y + dy / dist * s.r
        x2 = t.x - dx / dist * (t.r + ARROW_OFFSET)
        y2 = t.y - dy / dist * (t.r + ARROW_OFFSET)
        parts.append(
            f'<line class="edge edge-{edge.type}" x1="{x1:.1f}" y1="{y1:.1f}" x2="{x2:.1f}" y2="{y2:.1f}" '
            f'stroke="{LINK_COLORS[edge.type]}" stroke-width="{cfg.edge_width}" opacity="0.6" '
            f'marker-end="url(#arrow-{edge.type})"/>'
        )
    parts.append("</g>")

    parts.append('<g id="nodes">')
    for n in nodes:
        fill = ROOT_COLOR if n.is_root else NODE_FILL
        stroke = ROOT_COLOR if n.is_root else EDGE_COLOR
        parts.append(
            f'<g class="node" transform="translate({n.x:.1f}, {n.y:.1f})">'
            f'<circle cx="0" cy="0" r="{n.r:.1f}" fill="{fill}" stroke="{stroke}" stroke-width="1.5"/>'
            f'<text x="0" y="{n.r + 11:.1f}" fill="{TEXT_COLOR}" font-family="Helvetica" '
            f'font-size="10" text-anchor="middle">{esc(n.id)}</text></g>'
        )
    parts.append("</g>")
    parts.append("</svg>")
    return "\n".join(parts) + "\n"


PAGE_TEMPLATE = Template(
    """<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>$title</title>
  <style>
    body { margin: 0; height: 100vh; display: flex; flex-direction: column; background: $bg; color: $fg; font: 12px system-ui, sans-serif; }
    header { display: flex; gap: 12px; align-items: center; padding: 8px 12px; }
    header button { background: $node_fill; color: $fg; border: 1px solid $edge; border-radius: 6px; padding: 4px 10px; cursor: pointer; }
    main { flex: 1; min-height: 0; }
    main svg { width: 100%; height: 100%; display: block; touch-action: none; }
  </style>
</head>
<body>
  <header>
    <button id="resetBtn" type="button">Reset</button>
    <span>Drag to pan, scroll to zoom</span>
    <span style="color: $leadsto">&#8594; leadsto</span>
    <span style="color: $dependson">&#8593; dependson</span>
    <span style="color: $informedby">&#9678; informedby</span>
  </header>
  <main>
$svg
  </main>
  <script>
    (function () {
      const svg = document.querySelector('main svg');
      if (!svg) return;
      const vb = svg.viewBox.baseVal;
      const base = { x: vb.x, y: vb.y, width: vb.width, height: vb.height };
      const start = { x: $view_x, y: $view_y, zoom: $view_zoom };

      function reset() {
        vb.width = base.width / start.zoom;
        vb.height = base.height / start.zoom;
        vb.x = base.x + start.x + (base.width - vb.width) / 2;
        vb.y = base.y + start.y + (base.height - vb.height) / 2;
      }

      let drag = null;
      svg.addEventListener('pointerdown', (e) => {
        svg.setPointerCapture(e.pointerId);
        drag = { x: e.clientX, y: e.clientY, vbX: vb.x, vbY: vb.y };
      });
      svg.addEventListener('pointerup', () => { drag = null; });
      svg.addEventListener('pointermove', (e) => {
        if (!drag) return;
        const rect = svg.getBoundingClientRect();
        vb.x = drag.vbX - (e.clientX - drag.x) * vb.width / rect.width;
        vb.y = drag.vbY - (e.clientY - drag.y) * vb.height / rect.height;
      });
      svg.addEventListener('wheel', (e) => {
        e.preventDefault();
        const scale = e.deltaY < 0 ? 1 / 1.1 : 1.1;
        const rect = svg.getBoundingClientRect();
        const fx = (e.clientX - rect.left) / rect.width;
        const fy = (e.clientY - rect.top) / rect.height;
        vb.x += vb.width * (1 - scale) * fx;
        vb.y += vb.height * (1 - scale) * fy;
        vb.width *= scale;
        vb.height *= scale;
      }, { passive: false });
      document.getElementById('resetBtn').addEventListener('click', reset);
      reset();
    })();
  </script>
</body>
</html>
"""
)


def wrap_html(svg: str, *, title: str, viewport: ViewportState | None = None) -> str:
    """Standalone pan/zoom page around an SVG.

    viewport gives the initial pan offset (layout units) and zoom; Reset
    returns to it.
    """
    viewport = viewport or ViewportState()
    return PAGE_TEMPLATE.substitute(
        title=esc(title),
        svg=svg.rstrip("\n"),
        bg=BG,
        fg=TEXT_COLOR,
        node_fill=NODE_FILL,
        edge=EDGE_COLOR,
        leadsto=LINK_COLORS["leadsto"],
        dependson=LINK_COLORS["dependson"],
        informedby=LINK_COLORS["informedby"],
        view_x=f"{viewport.x:g}",
        view_y=f"{viewport.y:g}",
        view_zoom=f"{viewport.zoom:g}",
    )
