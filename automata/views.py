import json
import logging
from functools import wraps

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from . import engines
from .batch import output_batch_test
from .exceptions import StructuralError, ValidationError
from .graph import MachineKind
from .problems import check_solution, get_problem, list_problems
from .properties import check_all_properties
from .serialization import automaton_from_dict
from .validation import validate, validate_or_raise

logger = logging.getLogger(__name__)


def json_api(view):
    """
    Turn the errors a view can raise into JSON error responses.

    Malformed JSON, a malformed automaton and bad parameters give a 400
    with {'error': message}; an automaton that fails validation also lists
    every broken rule under 'errors'. Anything else is a 500.
    """
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except ValidationError as e:
            logger.warning('Rejected invalid automaton: %s', e)
            return JsonResponse({'error': str(e), 'errors': e.result.all_errors}, status=400)
        except (StructuralError, ValueError, KeyError, TypeError) as e:
            message = f'Missing field: {e}' if isinstance(e, KeyError) else str(e)
            logger.warning('Bad request to %s: %s', request.path, message)
            return JsonResponse({'error': message}, status=400)
        except Exception as e:
            logger.exception('Unexpected error in %s', request.path)
            return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)

    return csrf_exempt(wrapper)


def _load_request(request):
    """
    Parse the request body and the automaton it carries.

    Returns:
        (data, automaton) where data is the decoded body
    """
    data = json.loads(request.body)
    if not isinstance(data, dict):
        raise ValueError('Request body must be a JSON object')

    if 'automaton' not in data:
        raise ValueError('Missing automaton definition')
    if 'type' not in data:
        raise ValueError('Missing machine type')

    return data, automaton_from_dict(data['automaton'], data['type'])


def _input_string(data) -> str:
    input_string = data.get('input', '')
    if not isinstance(input_string, str):
        raise ValueError('Input must be a string')
    return input_string


@json_api
@require_POST
def validate_automaton(request):
    """
    Check an automaton against the structural rules of its machine class.

    Expects a POST request with a JSON body containing:
    - type: dfa, nfa, pda, moore, mealy, fsm or tm
    - automaton: The automaton in its saved JSON shape

    Returns {valid, message, errors}.
    """
    data, automaton = _load_request(request)
    result = validate(automaton)

    return JsonResponse({
        'valid': result.ok,
        'message': result.message,
        'errors': result.all_errors,
    })


@json_api
@require_POST
def reset_simulation(request):
    """Initial configuration for an input string."""
    data, automaton = _load_request(request)
    validate_or_raise(automaton)

    configuration = engines.reset(automaton, _input_string(data))

    return JsonResponse({'configuration': configuration.to_dict()})


@json_api
@require_POST
def step_simulation(request):
    """
    Advance a simulation by one step.

    The body carries the configuration returned by a previous reset or step
    call. Without one, the simulation starts from the reset configuration
    for 'input'.
    """
    data, automaton = _load_request(request)
    validate_or_raise(automaton)

    engine = engines.get_engine(automaton.kind)
    if data.get('configuration') is None:
        configuration = engine.reset(automaton, _input_string(data))
    else:
        configuration = engine.configuration_from_dict(data['configuration'])

    configuration = engine.step(automaton, configuration)

    return JsonResponse({'configuration': configuration.to_dict()})


@json_api
@require_POST
def run_simulation(request):
    """
    Run a simulation until it halts.

    Set 'history' to true in the body to get every intermediate configuration.
    """
    data, automaton = _load_request(request)
    validate_or_raise(automaton)

    result = engines.run(automaton, _input_string(data))

    response = {
        'accepted': result.accepted,
        'configuration': result.final_config.to_dict(),
    }
    if automaton.kind.is_transducer:
        response['output'] = result.final_config.output
    if data.get('history'):
        response['history'] = [configuration.to_dict() for configuration in result.history]

    return JsonResponse(response)


@json_api
@require_POST
def batch_test(request):
    """
    Run many strings through one machine.

    Acceptors take 'accept' and 'reject' lists. Moore and Mealy machines
    take 'cases', a list of {input, expectedOutput}.
    """
    data, automaton = _load_request(request)
    validate_or_raise(automaton)

    if automaton.kind.is_transducer and 'cases' in data:
        result = output_batch_test(automaton, data['cases'])
    else:
        accept_strings = data.get('accept', [])
        reject_strings = data.get('reject', [])
        if not isinstance(accept_strings, list) or not isinstance(reject_strings, list):
            raise ValueError('accept and reject must be lists of strings')
        result = engines.batch_test(automaton, accept_strings, reject_strings)

    return JsonResponse(result.to_dict())


@json_api
@require_POST
def check_properties(request):
    """
    Django view to check the structural properties of an automaton.

    Returns deterministic, complete and connected flags plus the unreachable
    states and the input alphabet.
    """
    data, automaton = _load_request(request)

    return JsonResponse(check_all_properties(automaton))


@json_api
@require_GET
def problems(request, kind):
    return JsonResponse({'problems': list_problems(kind)})


@json_api
@require_POST
def check_problem(request, kind, problem_id):
    """
    Check a candidate machine against a bundled problem.

    The body needs 'automaton'; 'type' defaults to the problem set name.
    """
    try:
        problem = get_problem(kind, problem_id)
    except ValueError:
        return JsonResponse({'error': f"Unknown problem set '{kind}'"}, status=404)
    if problem is None:
        return JsonResponse({'error': f"Unknown problem '{problem_id}'"}, status=404)

    data = json.loads(request.body)
    if not isinstance(data, dict) or 'automaton' not in data:
        raise ValueError('Missing automaton definition')

    machine_type = data.get('type', kind)
    if problem.kind.is_transducer and machine_type == 'fsm':
        machine_type = problem.kind
    automaton = automaton_from_dict(data['automaton'], machine_type)
    validate_or_raise(automaton)

    result = check_solution(automaton, problem)

    response = result.to_dict()
    response['problem'] = problem.id
    if problem.kind == MachineKind.TM:
        response['tapeCount'] = problem.tape_count
    return JsonResponse(response)
