#!/usr/bin/env python3
"""
Seed UGP with demo data for local development.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.actions import DEFAULT_ACTIONS
from app.core.security import create_access_token
from app.database import SessionLocal, init_db
from app.models.content import ContentNode
from app.models.localization import LocalizedText
from app.models.users import User, UserType
from app.services.group_permissions import GroupPermissionsService

LABELS_EN = {
    "browse": "Browse Node",
    "create": "Create",
    "update": "Update",
    "delete": "Delete",
    "publish": "Publish",
    "sendtopublish": "Send To Publish",
    "move": "Move",
    "copy": "Copy",
    "sort": "Sort",
    "rollback": "Rollback",
    "rights": "Permissions",
    "protect": "Public access",
    "assignDomain": "Culture and Hostnames",
    "notify": "Notifications",
    "auditTrail": "Audit Trail",
    "sendToTranslate": "Send To Translation",
    "translate": "Translate",
}


def main():
    print("Seeding demo data...")
    init_db()

    session = SessionLocal()
    try:
        # ── User types ────────────────────────────────────────────────────────
        admin = UserType(id=1, name="Administrators", alias="admin")
        writer = UserType(id=2, name="Writer", alias="writer")
        editor = UserType(id=3, name="Editor", alias="editor")
        translator = UserType(id=4, name="Translator", alias="translator")
        session.add_all([admin, writer, editor, translator])
        session.flush()

        # ── Users ─────────────────────────────────────────────────────────────
        session.add_all(
            [
                User(id=1, name="Site Admin", user_type_id=admin.id, culture="en-US"),
                User(id=2, name="Wren Writer", user_type_id=writer.id, culture="en-US"),
                User(id=3, name="Eddie Editor", user_type_id=editor.id, culture="en-US"),
                User(id=4, name="Ezra Editor", user_type_id=editor.id, culture="en-US"),
                User(id=5, name="Tove Translator", user_type_id=translator.id, culture="en-US"),
            ]
        )

        # ── Content tree ──────────────────────────────────────────────────────
        home = ContentNode.create(1, "Home")
        news = ContentNode.create(5, "News", parent=home)
        article = ContentNode.create(6, "Launch article", parent=news)
        about = ContentNode.create(7, "About", parent=home)
        session.add_all([home, news, article, about])

        # ── Action labels ─────────────────────────────────────────────────────
        for action in DEFAULT_ACTIONS:
            label = LABELS_EN.get(action.alias)
            if label:
                session.add(
                    LocalizedText(key=f"actions/{action.alias}", culture="en-US", value=label)
                )
        session.commit()

        # ── Group permissions ─────────────────────────────────────────────────
        service = GroupPermissionsService(session)
        service.set_group_permissions(
            home.id,
            {writer.id: ["F", "C", "A"], editor.id: ["F", "C", "A", "U", "D"], translator.id: ["F", "4"]},
            replace_permissions_on_users=True,
        )
        service.set_group_permissions(about.id, {writer.id: []}, replace_permissions_on_users=True)

        print("Demo data seeded.")
        print(f"  Admin token: {create_access_token(1, 'admin')}")
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
