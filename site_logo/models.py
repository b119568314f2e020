from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Candidate(BaseModel):
    """A discovered, not yet verified reference to a possible logo image"""
    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Absolute, normalized URL (unique within a run)")
    priority: int = Field(..., description="Attempt order, lower first")
    source: str = Field(..., description="Extraction rule that produced the candidate")
    sizes: Optional[str] = Field(None, description="Declared sizes, informational only")


class SavedArtifact(BaseModel):
    """A logo image written to the output directory"""
    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="URL the image was downloaded from")
    local_path: str = Field(..., description="Path of the written file")
    filename: str = Field(..., description="File name inside the output directory")
    format: str = Field(..., description="svg, png, jpg, gif, webp, ico, bmp or tiff")
    source: str = Field(..., description="Source tag of the candidate or provider")
    content_type: Optional[str] = Field(None, description="Content-Type reported by the server")


class ExtractionResult(BaseModel):
    """Outcome of one extraction run for a site"""
    model_config = ConfigDict(frozen=True)

    success: bool
    domain: str
    logos: List[SavedArtifact] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def count(self):
        return len(self.logos)

    @property
    def primary(self):
        return self.logos[0] if self.logos else None

    def to_dict(self):
        """
        Build the result record returned to callers

        Successful records mirror the primary artifact in top-level fields.
        """
        if not self.success:
            return {
                "success": False,
                "domain": self.domain,
                "error": self.error,
            }

        primary = self.primary
        return {
            "success": True,
            "domain": self.domain,
            "count": self.count,
            "logos": [logo.model_dump() for logo in self.logos],
            "logo_url": primary.url,
            "local_path": primary.local_path,
            "filename": primary.filename,
            "format": primary.format,
            "source": primary.source,
            "content_type": primary.content_type,
        }
