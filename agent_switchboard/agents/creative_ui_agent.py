"""Creative UI Agent for component generation requests.

This module implements an agent that turns UI requests into structural
component blueprints (name, description, feature list, section outline,
TSX template) and keeps every generated blueprint for later retrieval.
"""

import logging
import re

from ..core.agent_protocol import BaseAgent
from ..schemas import (
    AgentDescriptor,
    AgentId,
    ComponentBlueprint,
    Response,
    ResponseKind,
    SessionState,
    ToolDescriptor,
)
from ..utils.identifiers import generate_id

logger = logging.getLogger(__name__)


# (keywords, name, description, features, sections); checked in order.
COMPONENT_TEMPLATES: tuple[tuple[tuple[str, ...], str, str, list[str], list[str]], ...] = (
    (
        ("form",),
        "Interactive Form",
        "A responsive form component with validation",
        ["Input validation", "Error handling", "Submit functionality", "Responsive design"],
        ["Header", "Name field", "Email field", "Message field", "Submit button"],
    ),
    (
        ("button",),
        "Custom Button",
        "A reusable button component with multiple variants",
        ["Multiple styles", "Loading states", "Icon support", "Accessibility"],
        ["Variant styles (primary, secondary, danger)", "Sizes (sm, md, lg)", "Loading spinner"],
    ),
    (
        ("card",),
        "Component Card",
        "A flexible card component for displaying content",
        ["Image support", "Action buttons", "Hover effects", "Content slots"],
        ["Media area", "Title", "Body content", "Action row"],
    ),
    (
        ("navigation", "navbar"),
        "Navigation Component",
        "A responsive navigation bar with mobile menu",
        ["Mobile responsive", "Dropdown menus", "Active states", "Logo placement"],
        ["Logo", "Primary links", "Dropdown menu", "Mobile menu toggle"],
    ),
)

DEFAULT_TEMPLATE = (
    "Custom Component",
    "A tailored component based on your requirements",
    ["Custom functionality", "Modern design", "TypeScript support", "Responsive layout"],
    ["Title", "Description", "Content area", "Primary and secondary actions"],
)

DASHBOARD_TEMPLATE = (
    "Dashboard Layout",
    "A dashboard shell with summary widgets and a main content area",
    ["Summary metrics", "Filter bar", "Responsive grid", "Widget slots"],
    ["Header with filters", "KPI cards", "Main chart area", "Recent activity table"],
)

VISUALIZATION_TEMPLATE = (
    "Data Visualization",
    "An interactive chart component for exploring a data series",
    ["Chart type switching", "Tooltips", "Legend", "Responsive sizing"],
    ["Chart title", "Plot area", "Axis labels", "Legend"],
)


def _component_identifier(name: str) -> str:
    words = re.findall(r"[A-Za-z0-9]+", name)
    return "".join(word[:1].upper() + word[1:] for word in words) or "Component"


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def render_component_code(name: str, description: str, sections: list[str]) -> str:
    """Render a TSX functional component with one element per section."""
    identifier = _component_identifier(name)
    section_lines = "\n".join(
        f'      <section data-section="{_slug(section)}">{section}</section>'
        for section in sections
    )
    return f"""import React from 'react';

interface {identifier}Props {{
  className?: string;
}}

/** {description} */
export const {identifier}: React.FC<{identifier}Props> = ({{ className = '' }}) => {{
  return (
    <div className={{`rounded-lg shadow-lg p-6 ${{className}}`}}>
{section_lines}
    </div>
  );
}};"""


class CreativeUIAgent(BaseAgent):
    """Specialized agent for generating UI component blueprints."""

    def __init__(self, descriptor: AgentDescriptor | None = None):
        """Initialize creative UI agent."""
        if descriptor is None:
            descriptor = self._create_default_descriptor()

        super().__init__(descriptor)
        self._generated: list[ComponentBlueprint] = []

    @classmethod
    def create_default(cls) -> "CreativeUIAgent":
        """Create a CreativeUIAgent with default configuration."""
        return cls()

    @staticmethod
    def _create_default_descriptor() -> AgentDescriptor:
        """Create default descriptor for the creative UI agent."""
        return AgentDescriptor(
            id=AgentId.GENERATIVE_UI,
            display_name="Generative UI",
            description="Dynamic React component generation and UI creation",
            capabilities=frozenset(
                {
                    "component_generation",
                    "ui_creation",
                    "dynamic_rendering",
                    "real_time_updates",
                }
            ),
        )

    def get_system_prompt(self) -> str:
        """Instructions for component generation."""
        return """You are an advanced Generative UI agent specialized in creating dynamic React components and user interfaces.

Your capabilities:
- Generate React components dynamically based on user requests
- Create interactive UI elements with real functionality
- Build data visualizations, forms, dashboards, and custom components
- Suggest UI/UX improvements and patterns

Guidelines:
1. Always generate working, functional React components
2. Use modern React patterns (hooks, functional components)
3. Include proper TypeScript typing
4. Ensure responsive design
5. Provide multiple UI options when appropriate"""

    def get_tools(self) -> list[ToolDescriptor]:
        """Declare component and dashboard generation tools."""
        return [
            ToolDescriptor(
                name="generate_component",
                description="Generate a React component based on user requirements",
                parameters={
                    "type": "object",
                    "properties": {
                        "componentName": {
                            "type": "string",
                            "description": "Name of the component",
                        },
                        "description": {
                            "type": "string",
                            "description": "What the component should do",
                        },
                        "features": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Required features",
                        },
                    },
                    "required": ["componentName", "description"],
                },
            ),
            ToolDescriptor(
                name="create_dashboard",
                description="Create a complete dashboard interface",
                parameters={
                    "type": "object",
                    "properties": {
                        "dashboardType": {
                            "type": "string",
                            "description": "Type of dashboard (analytics, admin, etc.)",
                        },
                        "widgets": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Dashboard widgets",
                        },
                    },
                    "required": ["dashboardType"],
                },
            ),
        ]

    async def _generate_response(self, message: str, session: SessionState) -> Response:
        """Route the request to a blueprint template."""
        lowered = message.lower()

        if any(word in lowered for word in ("create", "generate", "build")):
            return self._generate(message, self.detect_component_type(message))
        if "dashboard" in lowered:
            return self._generate(message, DASHBOARD_TEMPLATE)
        if "form" in lowered:
            return self._generate(message, self.detect_component_type(message))
        if any(word in lowered for word in ("chart", "graph", "visualization")):
            return self._generate(message, VISUALIZATION_TEMPLATE)

        return self.create_response(
            """🎨 **Generative UI Agent Ready!**

I specialize in creating dynamic components and user interfaces.

**🏗️ Component Types:**
- **Interactive Forms** - Registration, contact, survey forms
- **Data Visualizations** - Charts, graphs, analytics dashboards
- **Dashboard Layouts** - Admin panels, analytics, monitoring
- **Custom Components** - Buttons, cards, modals, navigation

**💡 Try asking me:**
- "Create a user registration form"
- "Build an analytics dashboard"
- "Generate a product card component"

**🎯 What would you like me to create?**""",
            ResponseKind.UI,
        )

    @staticmethod
    def detect_component_type(
        message: str,
    ) -> tuple[str, str, list[str], list[str]]:
        """Choose a template by the first matching keyword."""
        lowered = message.lower()
        for keywords, name, description, features, sections in COMPONENT_TEMPLATES:
            if any(keyword in lowered for keyword in keywords):
                return name, description, features, sections
        return DEFAULT_TEMPLATE

    def _generate(
        self, message: str, template: tuple[str, str, list[str], list[str]]
    ) -> Response:
        name, description, features, sections = template
        blueprint = ComponentBlueprint(
            id=generate_id("component"),
            name=name,
            description=description,
            features=list(features),
            sections=list(sections),
            code=render_component_code(name, description, sections),
            source_request=message,
        )
        self._generated.append(blueprint)
        logger.info(f"Generated blueprint '{name}' ({blueprint.id})")

        feature_lines = "\n".join(f"- {feature}" for feature in blueprint.features)
        section_lines = "\n".join(
            f"{index}. {section}" for index, section in enumerate(blueprint.sections, 1)
        )
        return self.create_response(
            f"""🎨 **Component Generated Successfully!**

**Generated:** {blueprint.name}
**Description:** {blueprint.description}
**Component ID:** {blueprint.id}

**🧱 Structure:**
{section_lines}

```tsx
{blueprint.code}
```

**✨ Features Included:**
{feature_lines}

**💡 Want modifications?** Ask me to add features, change styling or create variations.""",
            ResponseKind.UI,
            {
                "component_type": blueprint.name,
                "component_id": blueprint.id,
                "generated_code": blueprint.code,
                "blueprint": blueprint.model_dump(mode="json"),
            },
        )

    def get_generated_components(self) -> list[ComponentBlueprint]:
        """All blueprints generated so far, oldest first."""
        return [blueprint.model_copy(deep=True) for blueprint in self._generated]

    def get_component(self, component_id: str) -> ComponentBlueprint | None:
        """Look up a generated blueprint by id."""
        for blueprint in self._generated:
            if blueprint.id == component_id:
                return blueprint.model_copy(deep=True)
        return None
