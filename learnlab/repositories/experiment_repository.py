from typing import List, Optional

from sqlalchemy.orm import Session

from learnlab.models.experiment import Experiment


class ExperimentRepository:
    """Repository for Experiment database operations following DDD pattern"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, experiment_id: int) -> Optional[Experiment]:
        """Get an experiment by ID"""
        return self.db.query(Experiment).filter(Experiment.id == experiment_id).first()

    def get_all(self) -> List[Experiment]:
        """Get all experiments, oldest first"""
        return self.db.query(Experiment).order_by(Experiment.id).all()

    def create(self, experiment_data: dict) -> Experiment:
        """Create a new experiment"""
        db_experiment = Experiment(**experiment_data)
        self.db.add(db_experiment)
        self.db.commit()
        self.db.refresh(db_experiment)
        return db_experiment

    def update(self, experiment: Experiment, update_data: dict) -> Experiment:
        """Update an experiment"""
        for field, value in update_data.items():
            setattr(experiment, field, value)
        self.db.commit()
        self.db.refresh(experiment)
        return experiment

    def delete(self, experiment: Experiment) -> bool:
        """Delete an experiment together with its quizzes"""
        self.db.delete(experiment)
        self.db.commit()
        return True
