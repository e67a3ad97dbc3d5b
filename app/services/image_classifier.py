# app/services/image_classifier.py
from typing import List, Sequence

from app.models.image import ImageRole, ImageSubmission, UploadedImage


def classify_images(
    main: Sequence[UploadedImage],
    thumbnail: Sequence[UploadedImage],
    extra: Sequence[UploadedImage],
) -> List[ImageSubmission]:
    """
    Merge the three upload groups into one sequence: main, then thumbnail,
    then extra, each group in submission order, every item tagged with its role.
    """
    submissions: List[ImageSubmission] = []
    for role, group in ((ImageRole.MAIN, main), (ImageRole.THUMBNAIL, thumbnail), (ImageRole.EXTRA, extra)):
        for image in group or ():
            submissions.append(ImageSubmission(role=role, image=image))
    return submissions


def has_primary_image(submissions: Sequence[ImageSubmission]) -> bool:
    """True when at least one main or thumbnail image is present; extras alone do not count."""
    return any(s.role in (ImageRole.MAIN, ImageRole.THUMBNAIL) for s in submissions)
