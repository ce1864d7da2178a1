import os
import traceback

from flask import Flask, request, jsonify, send_file, url_for
from flask_cors import CORS
from werkzeug.utils import secure_filename

from .compressor import compress_file, decompress_file
from .container import CONTAINER_EXTENSION

# -----------------------------------------------------------
# PATH CONFIGURATION
# -----------------------------------------------------------
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
DATA_DIR = os.environ.get("DATASQUEEZE_DATA_DIR", os.path.join(BASE_DIR, "data"))

# Error kinds caused by the uploaded content rather than the server
CLIENT_ERRORS = {"EmptyInput", "MalformedContainer"}


def _failure_response(result):
    status = 422 if result["error"] in CLIENT_ERRORS else 500
    return jsonify({"success": False, "error": result["error"], "message": result["message"]}), status


def create_app(config=None):
    # -----------------------------------------------------------
    # FLASK APP SETUP
    # -----------------------------------------------------------
    app = Flask(__name__)
    app.config.update(
        DATA_DIR=DATA_DIR,
        MAX_CONTENT_LENGTH=16 * 1024 * 1024,
    )
    if config:
        app.config.update(config)
    CORS(app)

    def data_dir():
        path = app.config["DATA_DIR"]
        os.makedirs(path, exist_ok=True)
        return path

    # -----------------------------------------------------------
    # ROUTES
    # -----------------------------------------------------------
    @app.route("/compress_file", methods=["POST"])
    def compress_file_route():
        try:
            file = request.files.get("file")
            if not file or not file.filename:
                return jsonify({"success": False, "error": "No file uploaded"}), 400

            filename = secure_filename(file.filename)
            if not filename:
                return jsonify({"success": False, "error": "Invalid file name"}), 400

            input_path = os.path.join(data_dir(), filename)
            file.save(input_path)

            compressed_filename = filename + CONTAINER_EXTENSION
            compressed_path = os.path.join(data_dir(), compressed_filename)
            result = compress_file(input_path, compressed_path)
            if not result["success"]:
                return _failure_response(result)

            return jsonify({
                "success": True,
                "filename": filename,
                "compressed_filename": compressed_filename,
                "original_size": result["original_size"],
                "compressed_size": result["compressed_size"],
                "saved": result["saved"],
                "saved_percent": result["saved_percent"],
                "download_url": url_for("download", filename=compressed_filename),
            })

        except Exception as e:
            print("Error in /compress_file:", e)
            traceback.print_exc()
            return jsonify({"success": False, "error": "Internal server error"}), 500

    @app.route("/decompress_file", methods=["POST"])
    def decompress_file_route():
        try:
            file = request.files.get("file")
            if not file or not file.filename:
                return jsonify({"success": False, "error": "No file uploaded"}), 400

            filename = secure_filename(file.filename)
            if not filename.endswith(CONTAINER_EXTENSION) or len(filename) == len(CONTAINER_EXTENSION):
                return jsonify({"success": False, "error": "Invalid file type"}), 400

            input_path = os.path.join(data_dir(), filename)
            file.save(input_path)

            output_filename = filename[:-len(CONTAINER_EXTENSION)]
            output_path = os.path.join(data_dir(), output_filename)
            result = decompress_file(input_path, output_path)
            if not result["success"]:
                return _failure_response(result)

            return jsonify({
                "success": True,
                "original_container": filename,
                "decompressed_file": output_filename,
                "decompressed_size": result["original_size"],
                "download_url": url_for("download", filename=output_filename),
            })

        except Exception as e:
            print("Error in /decompress_file:", e)
            traceback.print_exc()
            return jsonify({"success": False, "error": "Internal server error"}), 500

    @app.route("/download/<filename>")
    def download(filename):
        file_path = os.path.join(data_dir(), secure_filename(filename))
        if not os.path.isfile(file_path):
            return "File not found", 404

        return send_file(file_path, as_attachment=True, download_name=os.path.basename(file_path),
                         mimetype="application/octet-stream")

    return app


# -----------------------------------------------------------
if __name__ == "__main__":
    create_app().run(debug=True)
