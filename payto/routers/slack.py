from fastapi import APIRouter, BackgroundTasks, Depends
import logging

from payto.application.dispatcher import CommandDispatcher
from payto.dependencies import get_dispatcher, verify_slack_token
from payto.domain.commands import CommandRequest
from payto.schemas import SlackResponse, SlashCommandForm

router = APIRouter(tags=["slack"])
logger = logging.getLogger(__name__)


async def _run_command(form: SlashCommandForm, command: str, background_tasks: BackgroundTasks,
                       dispatcher: CommandDispatcher) -> SlackResponse:
    request = CommandRequest(
        user_id=form.user_id,
        user_name=form.user_name or form.user_id,
        text=form.text,
        response_url=form.response_url,
        command=command,
    )
    logger.info(f"Incoming {command or 'command'} from @{request.user_name}: '{form.text}'")
    result = await dispatcher.dispatch(request)
    if result.deferred is not None:
        # Slack wants an answer within 3 seconds; the rest reports via response_url
        background_tasks.add_task(result.deferred)
    return SlackResponse(response_type=result.response_type, text=result.text)


@router.post("/slack/commands", response_model=SlackResponse)
async def slash_command(background_tasks: BackgroundTasks,
                        form: SlashCommandForm = Depends(verify_slack_token),
                        dispatcher: CommandDispatcher = Depends(get_dispatcher)):
    return await _run_command(form, form.command, background_tasks, dispatcher)


@router.post("/send", response_model=SlackResponse)
async def send(background_tasks: BackgroundTasks,
               form: SlashCommandForm = Depends(verify_slack_token),
               dispatcher: CommandDispatcher = Depends(get_dispatcher)):
    return await _run_command(form, "/payto", background_tasks, dispatcher)


@router.post("/register", response_model=SlackResponse)
async def register(background_tasks: BackgroundTasks,
                   form: SlashCommandForm = Depends(verify_slack_token),
                   dispatcher: CommandDispatcher = Depends(get_dispatcher)):
    return await _run_command(form, "/payto-register", background_tasks, dispatcher)
