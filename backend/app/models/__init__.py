# Importe les modèles pour enregistrer leurs tables dans Base.metadata.

from app.models.submission import StudentSubmissionRecord  # noqa: F401
