import gradio as gr

from json_layer_editor.config import configure_logging, get_max_depth
from json_layer_editor.handlers_layers import (
    analyze_input_handler,
    apply_layer_edit_handler,
    apply_output_to_input_handler,
    export_layers_handler,
    generate_output_handler,
    import_layers_handler,
    load_input_file_handler,
    select_layer_handler,
)
from json_layer_editor.handlers_processor import ACTIONS, process_json_handler

configure_logging()

# --- UI Definition ---
with gr.Blocks(title="JSON Layer Editor") as demo:
    gr.Markdown("# JSON Layer Editor")
    gr.Markdown("Paste JSON that carries escaped JSON strings, edit any nested layer, and generate the merged result.")

    # State
    session_state = gr.State()

    with gr.Tab("Layers"):
        with gr.Row():
            # Left Panel: Input
            with gr.Column(scale=1):
                gr.Markdown("### 1. Input")
                input_file = gr.File(label="Upload JSON File", file_types=[".json", ".txt"])
                input_text = gr.Code(label="Input JSON", language="json", lines=18)
                max_depth = gr.Slider(
                    label="Maximum Layer Depth",
                    minimum=1,
                    maximum=30,
                    step=1,
                    value=get_max_depth() or 1,
                )
                analyze_btn = gr.Button("Analyze", variant="primary")
                status_msg = gr.Textbox(label="Status", interactive=False)

            # Middle Panel: Layer editor
            with gr.Column(scale=1):
                gr.Markdown("### 2. Edit Layers")
                layer_selector = gr.Dropdown(label="Layer", choices=[], interactive=False)
                layer_path = gr.Textbox(label="Path", interactive=False)
                layer_editor = gr.Code(label="Layer Content", language="json", lines=18)
                apply_btn = gr.Button("Apply Edit")

            # Right Panel: Output
            with gr.Column(scale=1):
                gr.Markdown("### 3. Output")
                generate_btn = gr.Button("Generate Output", variant="primary")
                output_text = gr.Code(label="Output JSON", language="json", lines=18)
                apply_output_btn = gr.Button("Use Output as Input")

        with gr.Accordion("Save / restore layers", open=False):
            with gr.Row():
                with gr.Column():
                    export_filename = gr.Textbox(label="Layers Filename (optional)", placeholder="layers")
                    export_btn = gr.Button("Export Layers")
                    export_download = gr.File(label="Download Layers")
                with gr.Column():
                    import_file = gr.File(label="Import Layers", file_types=[".json"])

        input_file.upload(
            fn=load_input_file_handler,
            inputs=[input_file],
            outputs=[input_text, status_msg],
        )

        analyze_btn.click(
            fn=analyze_input_handler,
            inputs=[input_text, max_depth],
            outputs=[session_state, layer_selector, layer_editor, layer_path, status_msg],
        )

        layer_selector.input(
            fn=select_layer_handler,
            inputs=[session_state, layer_selector],
            outputs=[layer_editor, layer_path],
        )

        apply_btn.click(
            fn=apply_layer_edit_handler,
            inputs=[session_state, layer_selector, layer_editor],
            outputs=[session_state, layer_selector, layer_editor, status_msg],
        )

        generate_btn.click(
            fn=generate_output_handler,
            inputs=[session_state],
            outputs=[output_text, status_msg],
        )

        apply_output_btn.click(
            fn=apply_output_to_input_handler,
            inputs=[output_text],
            outputs=[input_text, status_msg],
        )

        export_btn.click(
            fn=export_layers_handler,
            inputs=[session_state, export_filename],
            outputs=[export_download, status_msg],
        )

        import_file.upload(
            fn=import_layers_handler,
            inputs=[import_file],
            outputs=[session_state, input_text, layer_selector, layer_editor, layer_path, status_msg],
        )

    with gr.Tab("Processor"):
        with gr.Row():
            with gr.Column():
                proc_input = gr.Code(label="Input", language="json", lines=18)
                proc_action = gr.Radio(choices=ACTIONS, value=ACTIONS[0], label="Action")
                proc_btn = gr.Button("Run", variant="primary")
            with gr.Column():
                proc_output = gr.Code(label="Output", language="json", lines=18)
                proc_status = gr.Textbox(label="Status", interactive=False)

        proc_btn.click(
            fn=process_json_handler,
            inputs=[proc_input, proc_action],
            outputs=[proc_output, proc_status],
        )

if __name__ == "__main__":
    demo.launch()
