"""Board template and general template generators.

For board templates the built-in catalog is emitted first; random templates
fill any remaining count. Cards are nested inside the list they belong to.
General templates (project, task, AI prompt, branding) are a fixed catalog.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.shared.seeder.config import BoardTemplateConfig
    from app.shared.seeder.fixtures import FixtureGenerator


# (title, description, list, priority, estimated_hours, tags)
Card = tuple[str, str, str, str, float, list[str]]

CATALOG: list[dict[str, Any]] = [
    {
        "name": "Agile Sprint Board",
        "description": "Complete agile sprint management with user stories, tasks, and sprint planning",
        "categories": ["Development", "IT", "Business"],
        "lists": [
            ("Backlog", "#6B7280"),
            ("Sprint Planning", "#3B82F6"),
            ("In Progress", "#F59E0B"),
            ("Code Review", "#8B5CF6"),
            ("Testing", "#10B981"),
            ("Done", "#059669"),
        ],
        "cards": [
            ("Setup Development Environment", "Configure local development environment with all necessary tools",
             "Sprint Planning", "high", 4, ["setup", "environment"]),
            ("Write Unit Tests", "Create comprehensive unit tests for new features",
             "Testing", "medium", 6, ["testing", "quality"]),
            ("Code Review Session", "Review pull requests and provide feedback to team members",
             "Code Review", "high", 2, ["review", "collaboration"]),
        ],
        "tags": ["agile", "sprint", "development", "scrum"],
    },
    {
        "name": "Marketing Campaign Tracker",
        "description": "Track marketing campaigns from ideation to execution and analysis",
        "categories": ["Marketing", "Business", "Sales"],
        "lists": [
            ("Campaign Ideas", "#EC4899"),
            ("Planning", "#3B82F6"),
            ("Content Creation", "#F59E0B"),
            ("Review & Approval", "#8B5CF6"),
            ("Live", "#10B981"),
            ("Analysis", "#059669"),
        ],
        "cards": [
            ("Campaign Brief Creation", "Develop campaign brief with objectives, audience, and key messages",
             "Planning", "high", 8, ["planning", "strategy"]),
            ("Social Media Content", "Create engaging social media posts and visual content",
             "Content Creation", "medium", 12, ["content", "social-media"]),
            ("Performance Analytics", "Analyze campaign metrics and generate performance reports",
             "Analysis", "medium", 6, ["analytics", "reporting"]),
        ],
        "tags": ["marketing", "campaign", "content", "analytics"],
    },
    {
        "name": "Project Management Hub",
        "description": "Comprehensive project management with phases, milestones, and resource allocation",
        "categories": ["Business", "Operations", "General"],
        "lists": [
            ("Project Initiation", "#6B7280"),
            ("Planning Phase", "#3B82F6"),
            ("Execution", "#F59E0B"),
            ("Monitoring", "#8B5CF6"),
            ("Closing", "#10B981"),
        ],
        "cards": [
            ("Stakeholder Analysis", "Identify and analyze project stakeholders and their requirements",
             "Project Initiation", "high", 6, ["stakeholders", "analysis"]),
            ("Project Schedule Creation", "Develop detailed project timeline with milestones and dependencies",
             "Planning Phase", "high", 10, ["planning", "schedule"]),
            ("Risk Assessment", "Identify potential project risks and develop mitigation strategies",
             "Planning Phase", "medium", 4, ["risk", "planning"]),
        ],
        "tags": ["project", "management", "planning", "execution"],
    },
    {
        "name": "Customer Support Workflow",
        "description": "Streamlined customer support process from ticket creation to resolution",
        "categories": ["Support", "Business", "Operations"],
        "lists": [
            ("New Tickets", "#EF4444"),
            ("In Progress", "#F59E0B"),
            ("Awaiting Customer", "#8B5CF6"),
            ("Escalated", "#DC2626"),
            ("Resolved", "#10B981"),
        ],
        "cards": [
            ("Initial Response", "Send first response to customer acknowledging their ticket",
             "New Tickets", "high", 0.5, ["response", "acknowledgment"]),
            ("Technical Investigation", "Investigate technical issues and gather necessary information",
             "In Progress", "medium", 2, ["investigation", "technical"]),
            ("Solution Implementation", "Implement the solution and test it thoroughly",
             "In Progress", "high", 4, ["solution", "implementation"]),
        ],
        "tags": ["support", "customer", "tickets", "resolution"],
    },
    {
        "name": "Design Project Pipeline",
        "description": "Creative design workflow from concept to final deliverables",
        "categories": ["Design", "Business", "General"],
        "lists": [
            ("Brief & Research", "#6B7280"),
            ("Concept Development", "#EC4899"),
            ("Design Creation", "#3B82F6"),
            ("Client Review", "#F59E0B"),
            ("Revisions", "#8B5CF6"),
            ("Final Delivery", "#10B981"),
        ],
        "cards": [
            ("Client Brief Analysis", "Analyze client requirements and create project brief",
             "Brief & Research", "high", 4, ["brief", "analysis"]),
            ("Mood Board Creation", "Create visual mood board with inspiration and style direction",
             "Concept Development", "medium", 6, ["concept", "inspiration"]),
            ("Design Mockups", "Create initial design mockups and concepts",
             "Design Creation", "high", 12, ["design", "mockups"]),
        ],
        "tags": ["design", "creative", "concept", "deliverables"],
    },
    {
        "name": "Sales Pipeline Tracker",
        "description": "Track sales opportunities from lead generation to deal closure",
        "categories": ["Sales", "Business", "Marketing"],
        "lists": [
            ("Lead Generation", "#6B7280"),
            ("Qualification", "#3B82F6"),
            ("Proposal", "#F59E0B"),
            ("Negotiation", "#8B5CF6"),
            ("Closing", "#10B981"),
            ("Won", "#059669"),
        ],
        "cards": [
            ("Lead Research", "Research potential leads and gather company information",
             "Lead Generation", "medium", 2, ["research", "leads"]),
            ("Needs Assessment", "Conduct discovery call to understand prospect needs",
             "Qualification", "high", 1, ["discovery", "assessment"]),
            ("Proposal Development", "Create customized proposal based on prospect requirements",
             "Proposal", "high", 8, ["proposal", "customization"]),
        ],
        "tags": ["sales", "pipeline", "leads", "opportunities"],
    },
    {
        "name": "Event Planning Checklist",
        "description": "Comprehensive event planning from concept to execution",
        "categories": ["Business", "Operations", "Marketing"],
        "lists": [
            ("Event Concept", "#EC4899"),
            ("Planning & Logistics", "#3B82F6"),
            ("Marketing & Promotion", "#F59E0B"),
            ("Execution", "#10B981"),
            ("Post-Event", "#6B7280"),
        ],
        "cards": [
            ("Venue Selection", "Research and select appropriate venue for the event",
             "Planning & Logistics", "high", 8, ["venue", "logistics"]),
            ("Marketing Campaign", "Develop and execute marketing campaign to promote the event",
             "Marketing & Promotion", "high", 16, ["marketing", "promotion"]),
            ("Vendor Coordination", "Coordinate with vendors for catering, AV, and other services",
             "Planning & Logistics", "medium", 6, ["vendors", "coordination"]),
        ],
        "tags": ["event", "planning", "logistics", "execution"],
    },
    {
        "name": "Content Creation Workflow",
        "description": "Streamlined content creation process from ideation to publication",
        "categories": ["Marketing", "General", "Business"],
        "lists": [
            ("Content Ideas", "#EC4899"),
            ("Research", "#3B82F6"),
            ("Writing", "#F59E0B"),
            ("Editing", "#8B5CF6"),
            ("Review", "#10B981"),
            ("Published", "#059669"),
        ],
        "cards": [
            ("Topic Research", "Research trending topics and gather relevant information",
             "Research", "medium", 4, ["research", "topics"]),
            ("Content Writing", "Write engaging and informative content based on research",
             "Writing", "high", 8, ["writing", "content"]),
            ("SEO Optimization", "Optimize content for search engines and readability",
             "Editing", "medium", 3, ["seo", "optimization"]),
        ],
        "tags": ["content", "creation", "writing", "publishing"],
    },
]

RANDOM_CATEGORIES = [
    "Business", "IT", "Personal", "Marketing", "Development", "Design",
    "Sales", "Support", "Operations", "HR", "Finance", "General",
]
RANDOM_LIST_TITLES = [
    "To Do", "In Progress", "Review", "Testing", "Done",
    "Backlog", "Planning", "Execution", "Monitoring", "Completed",
    "Pending", "Active", "Blocked", "Ready", "Deployed",
]
RANDOM_CARD_TITLES = [
    "Setup Project Environment", "Create Project Plan", "Review Requirements",
    "Implement Core Features", "Write Documentation", "Conduct Testing",
    "Deploy to Production", "Gather Feedback", "Update Documentation",
    "Monitor Performance", "Optimize Code", "Fix Bugs",
]
CARD_PRIORITIES = ["low", "medium", "high", "urgent"]
CARD_TAGS = ["feature", "bug", "improvement", "documentation"]
TEMPLATE_TAGS = ["template", "workflow", "process", "management"]


def _lists_with_cards(lists: list[tuple[str, str]], cards: list[Card]) -> list[dict[str, Any]]:
    nested = [
        {"title": title, "order": order, "color": color, "cards": []}
        for order, (title, color) in enumerate(lists)
    ]
    by_title = {entry["title"]: entry for entry in nested}
    for title, description, list_title, priority, hours, tags in cards:
        target = by_title[list_title]
        target["cards"].append(
            {
                "title": title,
                "description": description,
                "order": len(target["cards"]),
                "priority": priority,
                "estimated_hours": hours,
                "tags": list(tags),
            }
        )
    return nested


class BoardTemplateGenerator:
    """Generator for reusable board templates."""

    def __init__(self, fixtures: FixtureGenerator, config: BoardTemplateConfig) -> None:
        self.fixtures = fixtures
        self.config = config

    def generate(self, created_by: str | None) -> list[dict[str, Any]]:
        """Generate template candidates.

        Args:
            created_by: Identifier of the privileged user owning the templates.

        Returns:
            ``config.count`` templates: catalog entries first, then random ones.
        """
        count = self.config.count
        templates = [self.from_catalog(entry, created_by) for entry in CATALOG[:count]]
        templates.extend(self.random_template(created_by) for _ in range(count - len(templates)))
        return templates

    def from_catalog(self, entry: dict[str, Any], created_by: str | None) -> dict[str, Any]:
        fx = self.fixtures
        created_at, updated_at = fx.timestamps(365)
        return {
            "_id": fx.object_id(),
            "name": entry["name"],
            "description": entry["description"],
            "category": entry["categories"][0],
            "categories": list(entry["categories"]),
            "lists": _lists_with_cards(entry["lists"], entry["cards"]),
            "tags": list(entry["tags"]),
            "created_by": created_by,
            "is_public": True,
            "is_active": True,
            "usage_count": 0,
            "created_at": created_at,
            "updated_at": updated_at,
        }

    def random_template(self, created_by: str | None) -> dict[str, Any]:
        fx = self.fixtures
        categories = fx.pick_many(RANDOM_CATEGORIES, 1, 3)
        lists = [(title, fx.color()) for title in fx.pick_many(RANDOM_LIST_TITLES, 3, 6)]
        cards: list[Card] = [
            (
                fx.choice(RANDOM_CARD_TITLES),
                fx.sentence(),
                fx.choice(lists)[0],
                fx.choice(CARD_PRIORITIES),
                fx.integer(1, 16),
                fx.pick_many(CARD_TAGS, 1, 3),
            )
            for _ in range(fx.integer(2, 6))
        ]
        created_at, updated_at = fx.timestamps(365)
        return {
            "_id": fx.object_id(),
            "name": f"{fx.faker.bs().title()} Template",
            "description": fx.paragraph(),
            "category": categories[0],
            "categories": categories,
            "lists": _lists_with_cards(lists, cards),
            "tags": fx.pick_many(TEMPLATE_TAGS, 2, 4),
            "created_by": created_by,
            "is_public": fx.boolean(0.8),
            "is_active": fx.boolean(0.9),
            "usage_count": fx.integer(0, 50),
            "created_at": created_at,
            "updated_at": updated_at,
        }


# General templates by group. AI prompts and branding assets are stored as
# ``workflow`` templates.
GENERAL_TEMPLATES: dict[str, list[dict[str, Any]]] = {
    "project": [
        {
            "name": "Kanban Project Management",
            "description": "Kanban board for project management with predefined lists and workflow stages",
            "type": "board",
            "category": "Development",
            "content": {
                "lists": ["Backlog", "To Do", "In Progress", "Review", "Done"],
                "cards": ["Project Setup", "Requirements Gathering"],
            },
            "required": ["lists", "cards"],
            "uses": 45,
            "rating": (4.5, 12),
        },
        {
            "name": "Scrum Sprint Board",
            "description": "Scrum template with sprint planning, daily standups and sprint review phases",
            "type": "board",
            "category": "Development",
            "content": {
                "lists": ["Product Backlog", "Sprint Backlog", "In Progress", "Testing", "Done"],
                "cards": ["Sprint Planning", "Daily Standup"],
            },
            "required": ["lists", "cards"],
            "uses": 32,
            "rating": (4.8, 8),
        },
        {
            "name": "Bug Tracking System",
            "description": "Track and resolve software bugs with priority levels and resolution tracking",
            "type": "board",
            "category": "Support",
            "content": {
                "lists": ["New Bugs", "Investigating", "In Progress", "Testing Fix", "Resolved"],
                "cards": ["Bug Report Template", "Bug Investigation"],
            },
            "required": ["lists", "cards"],
            "uses": 28,
            "rating": (4.2, 15),
        },
    ],
    "task": [
        {
            "name": "Feature Development Task",
            "description": "Develop a new feature through planning, development and testing phases",
            "type": "task",
            "category": "Development",
            "content": {
                "stages": ["Planning", "Development", "Testing", "Review", "Deployment"],
                "estimated_hours": 16,
                "priority": "medium",
                "checklist": ["Requirements analysis", "Technical design", "Implementation", "Unit testing",
                              "Integration testing", "Code review", "Documentation"],
            },
            "required": ["stages", "estimated_hours"],
            "uses": 67,
            "rating": (4.6, 23),
        },
        {
            "name": "Bug Fix Task",
            "description": "Fix a software bug with investigation, fix and verification steps",
            "type": "task",
            "category": "Support",
            "content": {
                "stages": ["Investigation", "Fix Development", "Testing", "Code Review", "Deployment"],
                "estimated_hours": 8,
                "priority": "high",
                "checklist": ["Reproduce the bug", "Identify root cause", "Develop fix", "Test fix",
                              "Code review", "Deploy fix"],
            },
            "required": ["stages", "estimated_hours"],
            "uses": 89,
            "rating": (4.4, 31),
        },
        {
            "name": "Content Creation Task",
            "description": "Create marketing content, documentation or creative assets",
            "type": "task",
            "category": "Marketing",
            "content": {
                "stages": ["Research", "Drafting", "Review", "Revision", "Final Approval"],
                "estimated_hours": 12,
                "priority": "medium",
                "checklist": ["Topic research", "Outline creation", "First draft", "Internal review",
                              "Stakeholder review", "Final revisions", "Approval and publishing"],
            },
            "required": ["stages", "estimated_hours"],
            "uses": 34,
            "rating": (4.7, 12),
        },
    ],
    "ai_prompt": [
        {
            "name": "Sprint Backlog Generator",
            "description": "Generate a sprint backlog from user stories and team capacity",
            "type": "workflow",
            "category": "Development",
            "content": {
                "prompt": "Generate a sprint backlog for a [project_type] project with [team_size] team "
                          "members. The sprint duration is [sprint_duration] weeks. Include user stories "
                          "with story points, acceptance criteria and estimated effort.",
                "variables": ["project_type", "team_size", "sprint_duration"],
                "output_format": "JSON",
            },
            "required": ["prompt", "variables"],
            "uses": 156,
            "rating": (4.8, 45),
        },
        {
            "name": "Task Description Writer",
            "description": "Create detailed, actionable task descriptions from brief requirements",
            "type": "workflow",
            "category": "Development",
            "content": {
                "prompt": "Write a detailed task description for: [task_summary]. Include objectives, "
                          "acceptance criteria, technical requirements, estimated effort, dependencies "
                          "and success metrics.",
                "variables": ["task_summary"],
                "output_format": "Structured Text",
            },
            "required": ["prompt", "variables"],
            "uses": 203,
            "rating": (4.6, 67),
        },
        {
            "name": "Code Review Assistant",
            "description": "Generate code review checklists for the type of code being reviewed",
            "type": "workflow",
            "category": "Development",
            "content": {
                "prompt": "Generate a code review checklist for [code_type] code covering security, "
                          "performance, code quality, testing, documentation and best practices for "
                          "[programming_language].",
                "variables": ["code_type", "programming_language"],
                "output_format": "Markdown",
            },
            "required": ["prompt", "variables"],
            "uses": 89,
            "rating": (4.9, 28),
        },
    ],
    "branding": [
        {
            "name": "Primary Brand Colors",
            "description": "Main brand color palette for a consistent visual identity",
            "type": "workflow",
            "category": "Design",
            "content": {
                "primary": "#3B82F6",
                "secondary": "#10B981",
                "accent": "#F59E0B",
                "neutral": "#6B7280",
                "error": "#EF4444",
            },
            "required": ["primary", "secondary"],
            "uses": 234,
            "rating": (4.7, 89),
        },
        {
            "name": "Typography System",
            "description": "Typography scale and font hierarchy for the platform",
            "type": "workflow",
            "category": "Design",
            "content": {
                "font_family": {"primary": "Inter, system-ui, sans-serif", "mono": "JetBrains Mono, monospace"},
                "font_size": {"sm": "0.875rem", "base": "1rem", "lg": "1.125rem", "xl": "1.25rem"},
                "font_weight": {"normal": "400", "semibold": "600", "bold": "700"},
            },
            "required": ["font_family", "font_size"],
            "uses": 189,
            "rating": (4.8, 56),
        },
        {
            "name": "Icon Library",
            "description": "Standard icon set for consistent user interface elements",
            "type": "workflow",
            "category": "Design",
            "content": {
                "icon_style": "outline",
                "icon_size": {"sm": "20px", "md": "24px", "lg": "32px"},
                "categories": ["navigation", "actions", "status", "communication", "files"],
            },
            "required": ["icon_style", "icon_size"],
            "uses": 145,
            "rating": (4.5, 34),
        },
    ],
}


class TemplateGenerator:
    """Generator for the general (non-board) template catalog."""

    def __init__(self, fixtures: FixtureGenerator) -> None:
        self.fixtures = fixtures

    def generate(self, created_by: str | None) -> list[dict[str, Any]]:
        """Every catalog entry, grouped in catalog order."""
        return [
            self.build(group, entry, created_by)
            for group, entries in GENERAL_TEMPLATES.items()
            for entry in entries
        ]

    def build(self, group: str, entry: dict[str, Any], created_by: str | None) -> dict[str, Any]:
        fx = self.fixtures
        average, votes = entry["rating"]
        content = entry["content"]
        return {
            "_id": fx.object_id(),
            "name": entry["name"],
            "description": entry["description"],
            "type": entry["type"],
            "group": group,
            "category": entry["category"],
            "content": copy.deepcopy(content),
            "structure": {
                "version": "1.0",
                "required": list(entry["required"]),
                "optional": [key for key in content if key not in entry["required"]],
            },
            "created_by": created_by,
            "is_public": True,
            "is_system": True,
            "status": "active",
            "usage": {
                "total_uses": entry["uses"],
                "last_used": fx.reference_time,
                "rating": {"average": average, "count": votes},
            },
            "created_at": fx.reference_time,
        }
