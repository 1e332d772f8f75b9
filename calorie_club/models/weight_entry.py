from datetime import datetime
from calorie_club.extensions import db

class WeightEntry(db.Model):
    __tablename__ = "weight_entries"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    weight = db.Column(db.Float, nullable=False)
    logged_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "weight": self.weight,
            "loggedAt": self.logged_at.isoformat(),
            "createdAt": self.created_at.isoformat() if self.created_at else None
        }
