"""comments: unique (video_id, seq)

Two comments on one video can no longer share an insertion number.

Revision ID: 005
Revises: 004
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("comments") as batch_op:
        batch_op.create_unique_constraint("uq_comments_video_seq", ["video_id", "seq"])


def downgrade() -> None:
    with op.batch_alter_table("comments") as batch_op:
        batch_op.drop_constraint("uq_comments_video_seq", type_="unique")
