from fastapi import APIRouter, Depends, HTTPException

from shopdesk.api.v1.schemas import (
    ExpandRequestSchema,
    ExpandResponseSchema,
    GraphLinkSchema,
    GraphNodeSchema,
    ImageRequestSchema,
    ImageResponseSchema,
    KeyInsightSchema,
    SpeechRequestSchema,
    SpeechResponseSchema,
)
from shopdesk.application.exceptions import LLMContractError, LLMUpstreamError
from shopdesk.application.use_cases.expand_idea import ExpandIdeaUseCase
from shopdesk.wiring.dependencies import get_expand_idea_use_case

router = APIRouter()


@router.post("/expand", response_model=ExpandResponseSchema)
def expand(req: ExpandRequestSchema, uc: ExpandIdeaUseCase = Depends(get_expand_idea_use_case)):
    try:
        content = uc.execute(req.seed)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (LLMUpstreamError, LLMContractError) as e:
        raise HTTPException(status_code=502, detail=str(e))

    return ExpandResponseSchema(
        title=content.title,
        summary=content.summary,
        narrative=content.narrative,
        key_insights=[KeyInsightSchema(label=k.label, value=k.value) for k in content.key_insights],
        nodes=[GraphNodeSchema(id=n.id, group=n.group) for n in content.nodes],
        links=[GraphLinkSchema(source=l.source, target=l.target) for l in content.links],
        image_prompt=content.image_prompt,
    )


@router.post("/image", response_model=ImageResponseSchema)
def image(req: ImageRequestSchema, uc: ExpandIdeaUseCase = Depends(get_expand_idea_use_case)):
    try:
        data_url = uc.illustrate(req.prompt)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (LLMUpstreamError, LLMContractError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    return ImageResponseSchema(data_url=data_url)


@router.post("/speech", response_model=SpeechResponseSchema)
def speech(req: SpeechRequestSchema, uc: ExpandIdeaUseCase = Depends(get_expand_idea_use_case)):
    try:
        audio = uc.narrate(req.text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (LLMUpstreamError, LLMContractError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    return SpeechResponseSchema(audio_base64=audio)
