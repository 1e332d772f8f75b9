from datetime import datetime

from sqlalchemy import Enum as SAEnum

from calorie_club.extensions import db
from calorie_club.enums.app_enum import ChallengeGoalEnum


class Challenge(db.Model):
    __tablename__ = "challenges"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)

    goal_type = db.Column(SAEnum(ChallengeGoalEnum), nullable=False, default=ChallengeGoalEnum.streak)
    goal_value = db.Column(db.Float, nullable=False)

    created_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    created_by = db.relationship("User")
    participants = db.relationship(
        "ChallengeParticipant",
        backref="challenge",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="ChallengeParticipant.joined_at"
    )


class ChallengeParticipant(db.Model):
    __tablename__ = "challenge_participants"

    id = db.Column(db.Integer, primary_key=True)
    challenge_id = db.Column(db.Integer, db.ForeignKey("challenges.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    progress = db.Column(db.Float, nullable=False, default=0)
    joined_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship("User")

    __table_args__ = (
        db.UniqueConstraint("challenge_id", "user_id", name="uk_challenge_user"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "challengeId": self.challenge_id,
            "userId": self.user_id,
            "progress": self.progress,
            "joinedAt": self.joined_at.isoformat() if self.joined_at else None,
            "user": {"id": self.user.id, "name": self.user.name} if self.user else None
        }
