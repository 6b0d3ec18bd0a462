from typing import Optional
from maq_bot.models.dto import IntakeData, IntakeLead
from maq_bot.utils.text_parsers import first_name


CANCEL_HINT = "_(Para cancelar, digite *Menu*)_"

MAIN_MENU_TEMPLATE = (
    "Olá, {name}! 👋 Sou o assistente virtual da *MAQ SERVICE*.\n\n"
    "Se você deseja adiantar o assunto, por favor, *digite o número* da opção desejada:\n\n"
    "*1* - Solicitar Orçamento/Visita Técnica\n"
    "*2* - Consultar Serviços Oferecidos\n"
    "*3* - Falar com o Proprietário"
)

APPLIANCE_PROMPT = (
    "Ok, vamos iniciar seu pedido de orçamento.\n\n"
    "Primeiro, informe qual o eletrodoméstico precisa de conserto?\n\n"
    "*Ex: Máquina de Lavar, Ventilador, etc.*\n\n"
    f"{CANCEL_HINT}"
)

MODEL_PROMPT = (
    "✅ Aparelho anotado! Agora, por favor, informe a *marca e o modelo*.\n\n"
    "*Exemplo: Brastemp Clean BWG11A*\n\n"
    f"{CANCEL_HINT}"
)

PROBLEM_PROMPT = (
    "✅ Modelo anotado! Para finalizar, por favor, *descreva o problema* que você está enfrentando.\n\n"
    f"{CANCEL_HINT}"
)

BUSINESS_HOURS = "Nosso horário de atendimento é de *Segunda a Sábado, das 07h às 18h*."

SUMMARY_TEMPLATE = (
    "Obrigado pelas informações! Seu pedido foi registrado com sucesso:\n\n"
    "*Eletrodoméstico:* {appliance}\n"
    "*Marca/Modelo:* {model}\n"
    "*Problema:* {problem}\n\n"
    "Em breve, um de nossos técnicos entrará em contato.\n\n"
    f"{BUSINESS_HOURS}"
)

SERVICES_MESSAGE = (
    "Somos especialistas no conserto e manutenção de:\n\n"
    "✅ Máquinas de lavar roupa\n"
    "✅ Tanquinhos (Lavadoras semiautomáticas)\n"
    "✅ Centrífugas de roupa\n"
    "✅ Ventiladores de todos os tipos\n\n"
    "Para solicitar um serviço, digite *Menu* e depois a opção *1*."
)

OWNER_FORWARD_MESSAGE = (
    "Certo. Sua mensagem será encaminhada para o proprietário. "
    "Por favor, aguarde que ele responderá assim que possível aqui mesmo."
)

FALLBACK_MESSAGE = (
    "Desculpe, não entendi sua mensagem. 🤔\n\n"
    "Para ver as opções de atendimento, digite *Menu*."
)


def render_main_menu(display_name: Optional[str]) -> str:
    return MAIN_MENU_TEMPLATE.format(name=first_name(display_name))


def render_summary(data: IntakeData) -> str:
    return SUMMARY_TEMPLATE.format(
        appliance=data.appliance,
        model=data.model,
        problem=data.problem,
    )


def format_lead_message(lead: IntakeLead) -> str:
    """
    Message for the owner chat with a finished request.
    """
    lines = [
        "🔔 *NOVO PEDIDO DE ORÇAMENTO*",
        f"👤 *Cliente:* {lead.name}",
        f"🔧 *Eletrodoméstico:* {lead.appliance}",
        f"🏷️ *Marca/Modelo:* {lead.model}",
        f"📝 *Problema:* {lead.problem}",
        f"🆔 Contato: {lead.sender_id}",
    ]
    return "\n".join(lines)


def format_owner_request(name: str, sender_id: str) -> str:
    return f"📞 {name} ({sender_id}) pediu para falar com o proprietário."
