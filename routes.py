import logging
from flask import request, jsonify, send_file, current_app
from analyzers.chart_builder import ChartDataBuilder
from analyzers.correlation_analyzer import CorrelationAnalyzer
from analyzers.profile_analyzer import ProfileAnalyzer
from analyzers.regression_analyzer import RegressionAnalyzer
from analyzers.statistics_analyzer import StatisticsAnalyzer
from analyzers.type_inference import TypeInferenceAnalyzer
from exceptions import AnalysisError, DegenerateComputationError, InvalidInputError
from models import Table, make_json_serializable
from parsers.file_parser import FileParserFactory
from utils.data_insights import DataInsights
from utils.export_utils import ExportUtils


def error_response(message, status_code):
    return jsonify({
        'status': 'error',
        'message': message
    }), status_code


def request_payload():
    """JSON body of the request; must be an object"""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return payload


def request_table(payload):
    """Build the table from payload['rows'], enforcing the configured row limit"""
    rows = payload.get('rows')
    if not isinstance(rows, list):
        raise InvalidInputError("'rows' must be a list of objects")

    max_rows = current_app.config['MAX_ANALYSIS_ROWS']
    if len(rows) > max_rows:
        raise InvalidInputError(f"Table has {len(rows)} rows; the limit is {max_rows}")
    return Table(rows)


def register_routes(app):
    """Register all routes with the Flask app"""

    @app.errorhandler(InvalidInputError)
    def handle_invalid_input(e):
        logging.warning(f"Invalid input: {str(e)}")
        return error_response(str(e), 400)

    @app.errorhandler(DegenerateComputationError)
    def handle_degenerate_computation(e):
        logging.warning(f"Degenerate computation: {str(e)}")
        return error_response(str(e), 422)

    @app.errorhandler(AnalysisError)
    def handle_analysis_error(e):
        logging.error(f"Analysis error: {str(e)}")
        return error_response(f'Analysis failed: {str(e)}', 500)

    @app.route('/api/health')
    def api_health():
        """Liveness check"""
        return jsonify({'status': 'success'})

    @app.route('/api/analyze/types', methods=['POST'])
    def api_infer_types():
        """Infer a type for every column"""
        table = request_table(request_payload())
        descriptors = TypeInferenceAnalyzer().analyze(table)
        return jsonify({
            'status': 'success',
            'columns': [descriptor.to_dict() for descriptor in descriptors]
        })

    @app.route('/api/analyze/statistics', methods=['POST'])
    def api_descriptive_statistics():
        """Descriptive statistics for the requested columns"""
        payload = request_payload()
        table = request_table(payload)
        results = StatisticsAnalyzer().analyze(table, payload.get('columns'))
        return jsonify({
            'status': 'success',
            'statistics': {name: stats.to_dict() for name, stats in results.items()}
        })

    @app.route('/api/analyze/correlation', methods=['POST'])
    def api_correlation():
        """Pearson correlation matrix over the requested columns"""
        payload = request_payload()
        table = request_table(payload)
        matrix = CorrelationAnalyzer().correlate(table, payload.get('columns'))
        return jsonify({
            'status': 'success',
            'correlations': matrix.to_dict()
        })

    @app.route('/api/analyze/regression', methods=['POST'])
    def api_regression():
        """Multiple linear regression"""
        payload = request_payload()
        table = request_table(payload)
        result = RegressionAnalyzer().regress(
            table,
            payload.get('dependentVariable'),
            payload.get('independentVariables'),
        )
        return jsonify({
            'status': 'success',
            'regression': result.to_dict()
        })

    @app.route('/api/analyze/chart', methods=['POST'])
    def api_chart_data():
        """Chart-ready series for a chart configuration"""
        payload = request_payload()
        table = request_table(payload)
        series = ChartDataBuilder().build_chart(table, payload.get('chartConfig'))
        return jsonify({
            'status': 'success',
            'chartData': series.to_dict()
        })

    @app.route('/api/analyze/insights', methods=['POST'])
    def api_insights():
        """Rule-based insights, computing the chart and correlations they draw on"""
        payload = request_payload()
        table = request_table(payload)
        prior_results = {}

        if payload.get('chartConfig'):
            prior_results['chart'] = ChartDataBuilder().build_chart(table, payload['chartConfig'])
        if payload.get('correlationColumns'):
            prior_results['correlations'] = CorrelationAnalyzer().correlate(
                table, payload['correlationColumns'])

        insights = DataInsights.generate_insights(table, prior_results)
        return jsonify({
            'status': 'success',
            'insights': [insight.to_dict() for insight in insights]
        })

    @app.route('/api/parse', methods=['POST'])
    def api_parse_file():
        """Parse an uploaded spreadsheet and profile it; nothing is stored"""
        uploaded = request.files.get('file')
        if not uploaded or uploaded.filename == '':
            return error_response('No file selected', 400)

        logging.info(f"Parsing file: {uploaded.filename}")
        table = FileParserFactory().parse_upload(uploaded.filename, uploaded.stream)
        max_rows = current_app.config['MAX_ANALYSIS_ROWS']
        if len(table) > max_rows:
            raise InvalidInputError(f"Table has {len(table)} rows; the limit is {max_rows}")

        return jsonify({
            'status': 'success',
            'filename': uploaded.filename,
            'rows': make_json_serializable(table.rows),
            'profile': ProfileAnalyzer().profile(table)
        })

    @app.route('/api/export/<format>', methods=['POST'])
    def api_export_results(format):
        """Download analysis results posted in the body"""
        payload = request_payload()
        buffer, filename, mimetype = ExportUtils().export(
            payload.get('results'), format, payload.get('name') or 'analysis')
        return send_file(buffer, mimetype=mimetype, as_attachment=True, download_name=filename)
