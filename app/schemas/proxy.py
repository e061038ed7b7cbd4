from pydantic import BaseModel, ConfigDict, Field


class AudioRequest(BaseModel):
    text: str | None = None
    voice: str | None = None


class AnalyzeRequest(BaseModel):
    prompt: str | None = None


class ExtractRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pdf_data: str | None = Field(default=None, alias="pdfData")


class AnalyzeResponse(BaseModel):
    text: str
