"""Achievement lifecycle: ownership rules, draft-only mutation and the
document-store-first write path with a best-effort relational mirror."""
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..errors import Forbidden, InvalidState
from ..models import AchievementMirror, User
from ..validators import validate_achievement_fields
from .db_errors import translate_db_errors


class AchievementService:
    def __init__(self, store):
        self.store = store

    def list_by_owner(self, owner_id):
        """Returns the owner's achievements newest first (possibly empty)."""
        return self.store.find_by_owner(owner_id)

    def get_by_id(self, achievement_id):
        return self.store.find_by_id(achievement_id)

    def get_for_owner(self, achievement_id, owner_id):
        achievement = self.store.find_by_id(achievement_id)
        if achievement.owner_id != owner_id:
            raise Forbidden('you do not own this achievement')
        return achievement

    def _load_owned_draft(self, achievement_id, owner_id, action):
        # Lifecycle state is checked before ownership: a non-draft record
        # rejects every caller the same way
        achievement = self.store.find_by_id(achievement_id)
        if not achievement.is_draft:
            raise InvalidState(f'only draft achievements can be {action}')
        if achievement.owner_id != owner_id:
            raise Forbidden('you do not own this achievement')
        return achievement

    def _raise_lost_write(self, achievement_id, owner_id, action):
        """A conditional write matched nothing: report what the record is now."""
        self._load_owned_draft(achievement_id, owner_id, action)
        raise InvalidState(f'only draft achievements can be {action}')

    def create(self, owner_id, title, description, document_ref):
        title, description, document_ref = validate_achievement_fields(title, description, document_ref)

        achievement = self.store.insert_draft(owner_id, title, description, document_ref)
        current_app.logger.info(f"Achievement {achievement.id} created by {owner_id}")

        self._mirror_best_effort('create', achievement.id, lambda: db.session.add(AchievementMirror(
            owner_id=owner_id,
            primary_store_ref=achievement.id,
            title=achievement.title,
            status=achievement.status,
            created_at=achievement.created_at,
            updated_at=achievement.updated_at,
        )))
        return achievement

    def update(self, achievement_id, owner_id, title, description, document_ref):
        self._load_owned_draft(achievement_id, owner_id, 'updated')
        title, description, document_ref = validate_achievement_fields(title, description, document_ref)

        # A concurrent submit or delete may have won since the read above
        if not self.store.update_draft(achievement_id, owner_id, title, description, document_ref):
            self._raise_lost_write(achievement_id, owner_id, 'updated')

        achievement = self.store.find_by_id(achievement_id)
        self._mirror_best_effort('update', achievement.id, lambda: self._mirror_row(achievement.id).update({
            'title': achievement.title,
            'updated_at': achievement.updated_at,
        }, synchronize_session=False))
        return achievement

    def delete(self, achievement_id, owner_id):
        achievement = self._load_owned_draft(achievement_id, owner_id, 'deleted')

        if not self.store.delete_draft(achievement_id, owner_id):
            self._raise_lost_write(achievement_id, owner_id, 'deleted')
        current_app.logger.info(f"Achievement {achievement.id} deleted by {owner_id}")

        self._mirror_best_effort('delete', achievement.id, lambda: self._mirror_row(achievement.id).delete(
            synchronize_session=False))

    def submit(self, achievement_id, owner_id, notes=None):
        self._load_owned_draft(achievement_id, owner_id, 'submitted')

        if not self.store.submit_draft(achievement_id, owner_id):
            self._raise_lost_write(achievement_id, owner_id, 'submitted')

        achievement = self.store.find_by_id(achievement_id)
        current_app.logger.info(f"Achievement {achievement.id} submitted by {owner_id}")

        self._mirror_best_effort('submit', achievement.id, lambda: self._mirror_row(achievement.id).update({
            'status': achievement.status,
            'submit_date': achievement.submit_date,
            'notes': notes or None,
            'updated_at': achievement.updated_at,
        }, synchronize_session=False))
        return achievement

    @translate_db_errors
    def reconcile_mirror(self, achievement_id=None):
        """Rewrite mirror rows from the document store.

        With an id only that record is repaired; otherwise every record is
        upserted and rows whose record no longer exists are removed.
        Records whose owner is gone from the directory are skipped.
        Returns the number of mirror rows written or removed.
        """
        if achievement_id is not None:
            achievements = [self.store.find_by_id(achievement_id)]
        else:
            achievements = self.store.find_all()

        owner_ids = {a.owner_id for a in achievements}
        known_owners = {
            user_id for (user_id,) in
            db.session.query(User.id).filter(User.id.in_(owner_ids))
        } if owner_ids else set()

        written = 0
        for achievement in achievements:
            if achievement.owner_id not in known_owners:
                current_app.logger.warning(
                    f"Mirror reconcile skipped achievement {achievement.id}: "
                    f"owner {achievement.owner_id} no longer exists")
                continue
            row = AchievementMirror.query.filter_by(primary_store_ref=achievement.id).first()
            if row is None:
                row = AchievementMirror(primary_store_ref=achievement.id, created_at=achievement.created_at)
                db.session.add(row)
            row.owner_id = achievement.owner_id
            row.title = achievement.title
            row.status = achievement.status
            row.submit_date = achievement.submit_date
            row.updated_at = achievement.updated_at
            written += 1

        if achievement_id is None:
            known = {a.id for a in achievements}
            for row in AchievementMirror.query.all():
                if row.primary_store_ref not in known:
                    db.session.delete(row)
                    written += 1

        db.session.commit()
        current_app.logger.info(f"Mirror reconciliation wrote {written} row(s)")
        return written

    @staticmethod
    def _mirror_row(achievement_id):
        return AchievementMirror.query.filter_by(primary_store_ref=achievement_id)

    @staticmethod
    def _mirror_best_effort(action, achievement_id, write):
        """Apply a mirror write; failures are logged and never reach the caller.

        ``write`` returns the number of rows it touched, or None for inserts.
        """
        try:
            matched = write()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.warning(
                f"Mirror {action} failed for achievement {achievement_id}: {e}")
            return
        if matched == 0:
            current_app.logger.warning(
                f"Mirror {action} found no row for achievement {achievement_id}")
